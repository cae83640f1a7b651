from pgprovisioner.models import CommandResult, ProbeResult, ProvisioningConfig


def test_missing_fields_lists_empty_and_absent_values_in_order():
    config = ProvisioningConfig(username="app", password="", main_db=None, billing_db="  ")

    assert config.missing_fields() == ["password", "main_db", "billing_db"]


def test_databases_are_owned_by_the_login_role():
    config = ProvisioningConfig(username="app", password="pw1", main_db="core", billing_db="billing")

    main_db, billing_db = config.databases

    assert (main_db.name, main_db.owner) == ("core", "app")
    assert (billing_db.name, billing_db.owner) == ("billing", "app")
    assert config.credential.password == "pw1"


def test_only_exists_counts_as_existing():
    assert ProbeResult.EXISTS.exists
    assert not ProbeResult.ABSENT.exists
    assert not ProbeResult.UNKNOWN.exists


def test_command_result_ok_tracks_exit_code():
    assert CommandResult(("true",), 0).ok
    assert not CommandResult(("false",), 1).ok
