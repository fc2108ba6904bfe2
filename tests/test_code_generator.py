import random
import string

import pytest

from src.core.exceptions import CodeGenerationExhausted
from src.helpers.code_generator import CODE_ALPHABET, generate_code, generate_unique_code, is_valid_code


def test_alphabet_is_uppercase_and_digits():
    assert CODE_ALPHABET == string.ascii_uppercase + string.digits
    assert len(CODE_ALPHABET) == 36


def test_generated_codes_have_expected_shape():
    rng = random.Random(42)
    for _ in range(500):
        code = generate_code(rng=rng)
        assert len(code) == 6
        assert all(char in CODE_ALPHABET for char in code)
        assert is_valid_code(code)


@pytest.mark.parametrize("code", ["abc123", "ABC12", "ABC1234", "ABC-12", ""])
def test_is_valid_code_rejects_malformed(code):
    assert not is_valid_code(code)


async def test_unique_code_skips_existing_codes():
    rng = random.Random(7)
    taken = {generate_code(rng=random.Random(7))}
    # the first draw from seed 7 is already taken, so a second draw is needed
    code = await generate_unique_code(lambda candidate: candidate in taken, rng=rng)
    assert code not in taken
    assert is_valid_code(code)


async def test_unique_code_accepts_async_lookup():
    seen = []

    async def exists(candidate):
        seen.append(candidate)
        return len(seen) < 3

    code = await generate_unique_code(exists)
    assert code == seen[-1]
    assert len(seen) == 3


async def test_unique_code_never_returns_a_taken_code():
    existing = set()
    rng = random.Random(1)
    for _ in range(200):
        code = await generate_unique_code(existing.__contains__, rng=rng)
        assert code not in existing
        existing.add(code)


async def test_exhausted_retries_raise_instead_of_returning_collision():
    calls = []

    def always_taken(candidate):
        calls.append(candidate)
        return True

    with pytest.raises(CodeGenerationExhausted) as excinfo:
        await generate_unique_code(always_taken, max_attempts=100)

    assert excinfo.value.attempts == 100
    assert len(calls) == 100
