import asyncio

from chatproxy.retry import RetryPolicy, parse_body


def test_parse_body_ok():
    parsed = parse_body('{"a": 1}')

    assert parsed.ok
    assert parsed.or_empty() == {"a": 1}


def test_parse_body_failure_keeps_raw_text():
    parsed = parse_body("<html>Too Many Requests</html>")

    assert not parsed.ok
    assert parsed.or_empty() == {}
    assert parsed.raw == "<html>Too Many Requests</html>"


def _counting_attempt(results):
    calls = []

    async def attempt():
        calls.append(1)
        return results[min(len(calls), len(results)) - 1]

    return attempt, calls


def test_policy_stops_after_max_attempts():
    attempt, calls = _counting_attempt(["busy"])
    policy = RetryPolicy(max_attempts=4, delay=0, retry_if=lambda r: r == "busy")

    result = asyncio.run(policy.run(attempt))

    assert result == "busy"
    assert len(calls) == 4


def test_policy_returns_first_acceptable_result():
    attempt, calls = _counting_attempt(["busy", "busy", "done"])
    policy = RetryPolicy(max_attempts=5, delay=0, retry_if=lambda r: r == "busy")

    result = asyncio.run(policy.run(attempt))

    assert result == "done"
    assert len(calls) == 3


def test_single_attempt_policy_never_retries():
    attempt, calls = _counting_attempt(["busy"])
    policy = RetryPolicy(max_attempts=1, delay=0, retry_if=lambda r: True)

    asyncio.run(policy.run(attempt))

    assert len(calls) == 1


def test_default_policy_does_not_retry():
    attempt, calls = _counting_attempt(["anything"])

    asyncio.run(RetryPolicy(max_attempts=3).run(attempt))

    assert len(calls) == 1
