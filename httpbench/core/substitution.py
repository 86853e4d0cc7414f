"""Per-request variable substitution."""

from typing import Dict, Mapping

TEST_NUMBER_TOKEN = "[test_number]"
THREAD_NUMBER_TOKEN = "[thread_number]"


def replace_variables(text: str, test_number: int, thread_number: int) -> str:
    """
    Replace the [test_number] and [thread_number] placeholders in text.

    Substitution is a single textual pass per token. There is no escaping, so
    user text that happens to contain a token literal is replaced as well.
    """
    result = text.replace(TEST_NUMBER_TOKEN, str(test_number))
    return result.replace(THREAD_NUMBER_TOKEN, str(thread_number))


def replace_in_mapping(
    mapping: Mapping[str, str], test_number: int, thread_number: int
) -> Dict[str, str]:
    """Apply replace_variables to every key and value of a mapping."""
    return {
        replace_variables(key, test_number, thread_number): replace_variables(
            value, test_number, thread_number
        )
        for key, value in mapping.items()
    }
