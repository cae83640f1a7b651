"""Actionable error catalog for pgprovisioner."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_configuration": {
        "what": "Missing PostgreSQL configuration: {fields}.",
        "next": (
            "Set POSTGRES_USER, POSTGRES_PASSWORD, MAIN_DB_NAME and BILLING_DB_NAME in `.env`, "
            "the environment, the YAML config file or the matching CLI options."
        ),
    },
    "command_failed": {
        "what": "{error}",
        "next": (
            "Run the failing command manually to inspect its output. Stages completed before "
            "the failure are kept; re-running provisioning skips them."
        ),
    },
    "command_not_started": {
        "what": "{error}",
        "next": "Check that `sudo`, `apt` and `psql` are installed and executable for this user.",
    },
    "command_timed_out": {
        "what": "{error}",
        "next": (
            "A command may be waiting for a password prompt. Configure passwordless sudo or "
            "raise `--command-timeout`."
        ),
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
