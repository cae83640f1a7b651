import pytest

from pgprovisioner.errors import ConfigurationError
from pgprovisioner.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".pgprovisioner.yml"
    config_file.write_text(
        "user: app\nmain_db: core\ncommand_timeout: 30\n",
        encoding="utf-8",
    )

    loader = ConfigLoader()
    loaded = loader.load(str(config_file))

    assert loaded["user"] == "app"
    assert loaded["main_db"] == "core"
    assert loaded["command_timeout"] == 30


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".pgprovisioner.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    loader = ConfigLoader()

    with pytest.raises(ConfigurationError, match="Unknown configuration keys"):
        loader.load(str(config_file))


def test_config_loader_rejects_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        ConfigLoader().load(str(tmp_path / "absent.yml"))


def test_load_env_reads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "POSTGRES_USER=app\n"
        "POSTGRES_PASSWORD=pw1\n"
        "MAIN_DB_NAME=core\n"
        "BILLING_DB_NAME=billing\n",
        encoding="utf-8",
    )

    values = ConfigLoader().load_env(str(env_file), environ={})

    assert values == {
        "user": "app",
        "password": "pw1",
        "main_db": "core",
        "billing_db": "billing",
    }


def test_load_env_prefers_process_environment(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("POSTGRES_USER=from_file\nMAIN_DB_NAME=core\n", encoding="utf-8")

    values = ConfigLoader().load_env(str(env_file), environ={"POSTGRES_USER": "from_env"})

    assert values == {"user": "from_env", "main_db": "core"}


def test_load_env_ignores_missing_file(tmp_path):
    values = ConfigLoader().load_env(str(tmp_path / ".env"), environ={"BILLING_DB_NAME": "billing"})

    assert values == {"billing_db": "billing"}


@pytest.mark.parametrize(
    "content, key",
    [
        ("command_timeout: soon\n", "command_timeout"),
        ("command_timeout: -5\n", "command_timeout"),
        ("password: yes\n", "password"),
        ("main_db: [core]\n", "main_db"),
        ("verbose: maybe\n", "verbose"),
    ],
)
def test_config_loader_rejects_values_of_the_wrong_type(tmp_path, content, key):
    config_file = tmp_path / ".pgprovisioner.yml"
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError, match=key) as excinfo:
        ConfigLoader().load(str(config_file))

    assert excinfo.value.missing_fields == (key,)


def test_load_env_keeps_dollar_sequences_literal(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("POSTGRES_PASSWORD=pa${HOME}ss\n", encoding="utf-8")

    values = ConfigLoader().load_env(str(env_file), environ={})

    assert values == {"password": "pa${HOME}ss"}
