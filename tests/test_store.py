import pytest

import design_radar.codec as codec
from design_radar.errors import CodecError
from design_radar.store import SnapshotStore


def test_codec_keeps_document(base_filtered):
    text = codec.encode(base_filtered)
    assert '\n' not in text
    assert codec.decode(text) == base_filtered


def test_codec_keeps_unicode():
    text = codec.encode({'pages': [{'id': '0:1', 'name': 'Başlık'}]})
    assert 'Başlık' in text


@pytest.mark.parametrize('text', ['not json', '[1, 2]', None])
def test_codec_rejects_bad_text(text):
    with pytest.raises(CodecError):
        codec.decode(text)


def test_latest_snapshot_round_trip(tmp_path, base_filtered):
    store = SnapshotStore(str(tmp_path / 'radar' / 'snapshots.sqlite'))
    assert store.get_latest_snapshot('FILE') is None

    store.save_snapshot('FILE', 'v1', 'My Figma Design', base_filtered)
    latest = store.get_latest_snapshot('FILE')

    assert latest.version == 'v1'
    assert latest.file_name == 'My Figma Design'
    assert latest.document == base_filtered


def test_latest_snapshot_is_newest(tmp_path):
    store = SnapshotStore(str(tmp_path / 'snapshots.sqlite'))
    store.save_snapshot('FILE', 'v1', 'Design', {'pages': [], 'version': 'v1'})
    store.save_snapshot('FILE', 'v2', 'Design', {'pages': [], 'version': 'v2'})
    store.save_snapshot('OTHER', 'v9', 'Other', {'pages': []})

    assert store.get_latest_snapshot('FILE').version == 'v2'
    assert store.get_latest_snapshot('OTHER').version == 'v9'


def test_same_version_is_replaced(tmp_path):
    store = SnapshotStore(str(tmp_path / 'snapshots.sqlite'))
    store.save_snapshot('FILE', 'v1', 'Design', {'pages': []})
    store.save_snapshot('FILE', 'v1', 'Design', {'pages': [{'id': '0:1', 'name': 'P', 'children': []}]})

    assert store.count_snapshots('FILE') == 1
    assert store.get_latest_snapshot('FILE').document['pages'][0]['id'] == '0:1'


def test_tracked_file_versions(tmp_path):
    store = SnapshotStore(str(tmp_path / 'snapshots.sqlite'))
    assert store.get_last_version('FILE') is None

    store.update_tracked_file('FILE', 'Design', 'v1')
    store.update_tracked_file('FILE', 'Design renamed', 'v2')

    assert store.get_last_version('FILE') == 'v2'


def test_clean_old_snapshots(tmp_path):
    store = SnapshotStore(str(tmp_path / 'snapshots.sqlite'))
    for i in range(5):
        store.save_snapshot('FILE', f'v{i}', 'Design', {'pages': []})

    deleted = store.clean_old_snapshots('FILE', keep_count=2)

    assert deleted == 3
    assert store.count_snapshots('FILE') == 2
    assert store.get_latest_snapshot('FILE').version == 'v4'
