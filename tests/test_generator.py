import pytest

from scripture.exceptions import (
    DuplicateReference,
    GenerationFailed,
    InvalidResponseShape,
    NotConfigured,
    UpstreamError,
    UpstreamHTTPError,
)
from scripture.generator import GenerationRequest, build_prompt, clean_response
from tests.conftest import FakeGenerativeClient, InMemoryArchive, make_scripture, scripture_reply


@pytest.fixture
def march_archive():
    return InMemoryArchive({
        "2025-03-01": make_scripture("Hebrews 11:1"),
        "2025-03-02": make_scripture("Romans 10:17"),
        "2025-02-28": make_scripture("John 3:16"),
    })


def test_clean_response_strips_fences_and_chatter():
    raw = 'Sure! Here it is:\n```json\n{"reference": "John 3:16"}\n```'
    assert clean_response(raw) == '{"reference": "John 3:16"}'
    assert clean_response('```\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_response('{"a": 1}') == '{"a": 1}'


def test_prompt_lists_exclusions_and_fields():
    prompt = build_prompt("Faith", 3, ["Hebrews 11:1", "Romans 10:17"])
    assert '"Faith"' in prompt
    assert "day 3 of the month" in prompt
    assert "Hebrews 11:1, Romans 10:17" in prompt
    assert "expandedVersions" in prompt
    assert "KJV, NKJV, NIV, MSG, NLT, AMP" in prompt


def test_prompt_without_exclusions_has_no_exclusion_section():
    assert "ALREADY been used" not in build_prompt("Faith", 1, [])


def test_generate_excludes_month_references(march_archive, make_generator):
    client = FakeGenerativeClient(scripture_reply("James 2:17"))
    scripture = make_generator(client, march_archive).generate("Faith", 3, 2025, 3)

    assert scripture.reference == "James 2:17"
    assert client.calls == 1
    assert "Hebrews 11:1" in client.prompts[0]
    assert "Romans 10:17" in client.prompts[0]
    assert "John 3:16" not in client.prompts[0]
    assert client.temperatures == [0.7]


def test_generate_retries_duplicate_reference(march_archive, make_generator):
    client = FakeGenerativeClient(
        scripture_reply("hebrews  11:1", fenced=True),
        scripture_reply("James 2:17", fenced=True),
    )
    scripture = make_generator(client, march_archive).generate("Faith", 3, 2025, 3)

    assert scripture.reference == "James 2:17"
    assert client.calls == 2
    # même ensemble d'exclusions à chaque tentative
    assert client.prompts[0] == client.prompts[1]


def test_generate_retries_malformed_and_upstream_errors(archive, make_generator):
    client = FakeGenerativeClient(
        "not json at all",
        UpstreamHTTPError(503, "overloaded"),
        scripture_reply("Psalm 46:1"),
    )
    scripture = make_generator(client, archive).generate("Strength", 5, 2025, 4)
    assert scripture.reference == "Psalm 46:1"
    assert client.calls == 3


def test_generate_gives_up_after_bounded_attempts(archive, make_generator):
    client = FakeGenerativeClient("", "{}", '{"reference": "John 3:16"}')
    with pytest.raises(GenerationFailed) as excinfo:
        make_generator(client, archive, max_retries=2).generate("Hope", 1, 2025, 5)

    assert client.calls == 3
    assert excinfo.value.attempts == 3
    assert isinstance(excinfo.value.last_error, InvalidResponseShape)


def test_generate_without_retries_makes_a_single_attempt(archive, make_generator):
    client = FakeGenerativeClient(UpstreamError("boom"))
    with pytest.raises(GenerationFailed):
        make_generator(client, archive, max_retries=0).generate("Hope", 1, 2025, 5)
    assert client.calls == 1


def test_missing_credentials_are_not_retried(archive, make_generator):
    client = FakeGenerativeClient(NotConfigured("no key"))
    with pytest.raises(NotConfigured):
        make_generator(client, archive).generate("Hope", 1, 2025, 5)
    assert client.calls == 1


def test_attempt_rejects_duplicate(make_generator, archive):
    client = FakeGenerativeClient(scripture_reply("Romans 10:17"))
    request = GenerationRequest("Faith", 3, 2025, 3, excluded_references=("Romans 10:17",))
    with pytest.raises(DuplicateReference) as excinfo:
        make_generator(client, archive).attempt(request)
    assert excinfo.value.reference == "Romans 10:17"


def test_attempt_keeps_main_verse_when_context_is_missing(make_generator, archive):
    client = FakeGenerativeClient(scripture_reply("Isaiah 40:31", expanded=None))
    request = GenerationRequest("Strength", 7, 2025, 6)
    scripture = make_generator(client, archive).attempt(request)
    assert scripture.reference == "Isaiah 40:31"
    assert not scripture.has_expanded
