"""
Tests for the allow-list backup script
"""
import json
import os

from backup_data import backup_database, default_data_file, restore_database
from common.config import ROOT_DIR, resolve_data_file


def write_json(path, data):
    path.write_text(json.dumps(data), encoding='utf-8')


def test_backup_copies_file(tmp_path):
    data_file = tmp_path / 'db.json'
    write_json(data_file, {'allowed_roles': ['1']})

    backup_path = backup_database(str(data_file), str(tmp_path / 'backups'))

    assert backup_path is not None
    assert json.loads(open(backup_path, encoding='utf-8').read()) == {'allowed_roles': ['1']}


def test_backup_without_data_file(tmp_path):
    assert backup_database(str(tmp_path / 'missing.json'), str(tmp_path / 'backups')) is None
    assert not (tmp_path / 'backups').exists()


def test_restore_keeps_old_copy(tmp_path):
    data_file = tmp_path / 'db.json'
    backup_file = tmp_path / 'backup.json'
    write_json(data_file, {'allowed_roles': ['1']})
    write_json(backup_file, {'allowed_roles': ['2', '3']})

    assert restore_database(str(backup_file), str(data_file)) is True

    assert json.loads(data_file.read_text(encoding='utf-8')) == {'allowed_roles': ['2', '3']}
    old_copies = list(tmp_path.glob('db.json.old_*'))
    assert len(old_copies) == 1
    assert json.loads(old_copies[0].read_text(encoding='utf-8')) == {'allowed_roles': ['1']}


def test_restore_rejects_invalid_backup(tmp_path):
    data_file = tmp_path / 'db.json'
    backup_file = tmp_path / 'backup.json'
    write_json(data_file, {'allowed_roles': ['1']})
    backup_file.write_text('not json', encoding='utf-8')

    assert restore_database(str(backup_file), str(data_file)) is False
    assert json.loads(data_file.read_text(encoding='utf-8')) == {'allowed_roles': ['1']}


def test_restore_missing_backup(tmp_path):
    assert restore_database(str(tmp_path / 'nope.json'), str(tmp_path / 'db.json')) is False


def test_default_data_file_ignores_working_directory(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('DATA_FILE', raising=False)

    assert default_data_file() == resolve_data_file('db.json')
    assert default_data_file() == os.path.join(ROOT_DIR, 'db.json')


def test_backup_from_other_directory_uses_bot_data_file(monkeypatch, tmp_path):
    bot_dir = tmp_path / 'bot'
    bot_dir.mkdir()
    elsewhere = tmp_path / 'elsewhere'
    elsewhere.mkdir()
    write_json(bot_dir / 'db.json', {'allowed_roles': ['7']})
    monkeypatch.setattr('common.config.ROOT_DIR', str(bot_dir))
    monkeypatch.setenv('DATA_FILE', 'db.json')
    monkeypatch.chdir(elsewhere)

    backup_path = backup_database(backup_dir=str(tmp_path / 'backups'))

    assert backup_path is not None
    assert json.loads(open(backup_path, encoding='utf-8').read()) == {'allowed_roles': ['7']}
