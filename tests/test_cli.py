"""Tests for the click CLI."""

import json

from click.testing import CliRunner

from pocket_calc.cli import main, tokenize


def invoke(*args):
    return CliRunner().invoke(main, list(args))


def test_tokenize():
    assert tokenize("1 +[memory-add]") == [("key", "1"), ("key", "+"), ("action", "memory-add")]


def test_keys_chain_left_to_right():
    result = invoke("keys", "2+3*4=")
    assert result.exit_code == 0
    assert result.output == "5 × 4 =\n20\n"


def test_keys_json_output():
    result = invoke("keys", "16[square-root]", "--json")
    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "primary": "4",
        "trace": "√16 =",
        "error_active": False,
        "active_operator": None,
    }


def test_keys_error_then_wait():
    result = invoke("keys", "10/0=")
    assert result.output == "Cannot divide by zero\n"

    result = invoke("keys", "10/0=", "--wait-ms", "2000")
    assert result.output == "0\n"


def test_keys_memory_advisory_expires():
    assert invoke("keys", "5[memory-add]").output == "Added to memory\n5\n"
    assert invoke("keys", "5[memory-add]", "--wait-ms", "1500").output == "5\n"


def test_keys_unknown_action():
    result = invoke("keys", "1[launch]")
    assert result.exit_code == 2
    assert "Unknown action" in result.output
