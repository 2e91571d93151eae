import copy
import json
import pathlib

import pytest

from design_radar.normalizer import filter_file

FIXTURES = pathlib.Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def figma_sample():
    return json.loads((FIXTURES / "figma_sample.json").read_text(encoding="utf-8"))


@pytest.fixture
def base_filtered(figma_sample):
    return filter_file(figma_sample)


@pytest.fixture
def clone():
    """Deep-copy a document and apply an in-place modification to the copy."""
    def _clone(doc, modify):
        copied = copy.deepcopy(doc)
        modify(copied)
        return copied
    return _clone
