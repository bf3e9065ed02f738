# tests/store/test_config_store.py
"""
Testes do Config Store (load / criação do default / save / reescrita com backup).

Os testes asseguram que:
- arquivo inexistente resulta em None no load (nunca erro)
- o default é criado com a documentação anexada e recarregado de forma estável
- extensões não suportadas e arquivos malformados geram erros tipados
- a reescrita mantém o arquivo anterior em `<caminho>~`
- uma falha de escrita após o backup restaura o arquivo original

Decisões arquiteturais:
    - Todo I/O acontece dentro de `tmp_path`
    - Falhas de escrita são simuladas via monkeypatch

Limites explícitos:
    - Não valida o parse de CLI (ver tests/cli)
"""

from pathlib import Path

import pytest

try:
    from cli_config.config_store import (
        ConfigStore,
        load_from_file,
        load_or_create_default,
        path_extension,
        save_to_file,
    )
    from cli_config.errors import (
        LoadingConfigError,
        RonError,
        SavingConfigError,
        UnsupportedConfigFileFormatError,
    )
    from cli_config.serde import RonSerde, YamlSerde
except Exception as e:  # noqa: BLE001
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None

from tests.fixtures.config_models.app_config import AppRootConfig, ServiceConfig


def _require_imports():
    """
    Garante que o Config Store e suas exceções tipadas estejam disponíveis para os testes.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config store modules. Implement:\n"
            "- src/cli_config/config_store.py (ConfigStore, load_from_file, save_to_file)\n"
            "- src/cli_config/errors.py (LoadingConfigError, SavingConfigError)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.mark.parametrize(
    "path, expected",
    [
        ("app.config.ron", ".ron"),
        ("/etc/app/app.yml", ".yml"),
        ("dir.d/app", None),
        ("app.", "."),
        (Path("a") / "b.yaml", ".yaml"),
    ],
)
def test_path_extension(path, expected):
    _require_imports()
    assert path_extension(path) == expected


def test_load_absent_file_returns_none(tmp_path):
    _require_imports()
    assert load_from_file(AppRootConfig, tmp_path / "absent.config.ron") is None


@pytest.mark.parametrize(
    "file_name, serde_type",
    [("app.config.ron", "RonSerde"), ("app.config.yaml", "YamlSerde"), ("app.yml", "YamlSerde")],
)
def test_load_or_create_default_writes_documented_default(tmp_path, config_docs, file_name, serde_type):
    """
    O arquivo criado contém exatamente a serialização do default + documentação.
    """
    _require_imports()
    serde = {"RonSerde": RonSerde, "YamlSerde": YamlSerde}[serde_type]()
    path = tmp_path / file_name

    config = load_or_create_default(AppRootConfig, path, config_docs)

    assert config == AppRootConfig()
    assert path.read_text(encoding="utf-8") == serde.serialize_config(AppRootConfig(), config_docs)
    # segunda chamada carrega o arquivo existente sem modificá-lo
    content = path.read_text(encoding="utf-8")
    assert load_or_create_default(AppRootConfig, path, "outra doc") == AppRootConfig()
    assert path.read_text(encoding="utf-8") == content


def test_save_then_load(tmp_path, custom_app_config):
    _require_imports()
    path = tmp_path / "app.config.yaml"
    save_to_file(custom_app_config, "docs", path)
    assert load_from_file(AppRootConfig, path) == custom_app_config


@pytest.mark.parametrize("file_name", ["app.config.json", "app", "app.config.RON"])
def test_unsupported_extension_on_load_and_save(tmp_path, file_name):
    _require_imports()
    path = tmp_path / file_name

    with pytest.raises(LoadingConfigError) as exc_info:
        load_from_file(AppRootConfig, path)
    assert isinstance(exc_info.value.cause, UnsupportedConfigFileFormatError)
    assert str(path) in exc_info.value.message

    with pytest.raises(SavingConfigError) as exc_info:
        save_to_file(AppRootConfig(), "", path)
    assert isinstance(exc_info.value.cause, UnsupportedConfigFileFormatError)
    assert not path.exists()


def test_malformed_file_raises_loading_error(tmp_path):
    _require_imports()
    path = tmp_path / "app.config.ron"
    path.write_text("(service: (port: ", encoding="utf-8")

    with pytest.raises(LoadingConfigError) as exc_info:
        load_or_create_default(AppRootConfig, path)
    assert isinstance(exc_info.value.cause, RonError)
    # o arquivo malformado nunca é substituído pelo default
    assert path.read_text(encoding="utf-8") == "(service: (port: "


def test_unreadable_path_raises_loading_error(tmp_path):
    _require_imports()
    path = tmp_path / "dir.config.ron"
    path.mkdir()
    with pytest.raises(LoadingConfigError):
        load_from_file(AppRootConfig, path)


def test_save_into_missing_directory_raises_saving_error(tmp_path):
    _require_imports()
    path = tmp_path / "missing" / "app.config.ron"
    with pytest.raises(SavingConfigError) as exc_info:
        load_or_create_default(AppRootConfig, path)
    assert isinstance(exc_info.value.cause, OSError)


def test_store_backup_path(tmp_path):
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.ron")
    assert store.backup_path() == tmp_path / "app.config.ron~"


def test_store_uses_tail_docs_by_default(tmp_path):
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.yaml", tail_docs="doc")
    store.save(AppRootConfig())
    assert store.path.read_text(encoding="utf-8").endswith("# doc")
    assert store.load() == AppRootConfig()


def test_rewrite_keeps_previous_file_as_backup(tmp_path, custom_app_config):
    """
    Após a reescrita, `<caminho>~` contém exatamente o conteúdo anterior.
    """
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.ron", tail_docs="v1")
    store.load_or_create_default()
    previous = store.path.read_text(encoding="utf-8")

    backup = store.rewrite(custom_app_config, "v2")

    assert backup == store.backup_path()
    assert backup.read_text(encoding="utf-8") == previous
    assert store.path.read_text(encoding="utf-8") == RonSerde().serialize_config(custom_app_config, "v2")
    assert store.load() == custom_app_config


def test_rewrite_replaces_an_older_backup(tmp_path, custom_app_config):
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.yaml")
    store.backup_path().write_text("stale backup", encoding="utf-8")
    store.load_or_create_default()
    previous = store.path.read_text(encoding="utf-8")

    store.rewrite(custom_app_config, "")

    assert store.backup_path().read_text(encoding="utf-8") == previous


def test_rewrite_without_current_file_writes_nothing(tmp_path):
    """
    Se o rename para o backup falhar, nenhuma escrita acontece.
    """
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.ron")

    with pytest.raises(SavingConfigError) as exc_info:
        store.rewrite(AppRootConfig(), "")

    assert isinstance(exc_info.value.cause, OSError)
    assert not store.path.exists()
    assert not store.backup_path().exists()


def test_rewrite_restores_backup_when_write_fails(tmp_path, custom_app_config, monkeypatch):
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.ron")
    store.load_or_create_default()
    previous = store.path.read_text(encoding="utf-8")

    def failing_save(config, tail_comment, config_file_path):
        raise SavingConfigError(f"Erro ao salvar a config em '{config_file_path}'")

    monkeypatch.setattr("cli_config.config_store.save_to_file", failing_save)

    with pytest.raises(SavingConfigError):
        store.rewrite(custom_app_config, "")

    assert store.path.read_text(encoding="utf-8") == previous
    assert not store.backup_path().exists()


def test_unencodable_text_raises_saving_error(tmp_path):
    _require_imports()
    path = tmp_path / "app.config.ron"
    with pytest.raises(SavingConfigError) as exc_info:
        save_to_file(AppRootConfig(service=ServiceConfig(api_token="\ud800")), "", path)
    assert isinstance(exc_info.value.cause, UnicodeEncodeError)
    assert str(path) in exc_info.value.message


def test_rewrite_restores_backup_when_text_cannot_be_encoded(tmp_path):
    """
    A escrita que trunca o arquivo e falha no encoding não deixa o caminho original vazio.
    """
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.ron")
    store.load_or_create_default()
    previous = store.path.read_text(encoding="utf-8")

    with pytest.raises(SavingConfigError) as exc_info:
        store.rewrite(AppRootConfig(service=ServiceConfig(api_token="\ud800")), "")

    assert isinstance(exc_info.value.cause, UnicodeEncodeError)
    assert store.path.read_text(encoding="utf-8") == previous
    assert not store.backup_path().exists()


def test_rewrite_restores_backup_on_unexpected_errors(tmp_path, monkeypatch):
    _require_imports()
    store = ConfigStore(config_type=AppRootConfig, path=tmp_path / "app.config.yaml")
    store.load_or_create_default()
    previous = store.path.read_text(encoding="utf-8")

    def interrupted_save(config, tail_comment, config_file_path):
        Path(config_file_path).write_text("", encoding="utf-8")
        raise RuntimeError("interrompido")

    monkeypatch.setattr("cli_config.config_store.save_to_file", interrupted_save)

    with pytest.raises(RuntimeError):
        store.rewrite(AppRootConfig(), "")

    assert store.path.read_text(encoding="utf-8") == previous
    assert not store.backup_path().exists()
