"""Tests for the retry engine and HTML normalization helpers."""

import pytest
from pdf_html_translator.errors import ErrorClassification, TranslationError
from pdf_html_translator.utils import (
    backoff_delay,
    normalize_html,
    strip_code_fence,
    unescape_inline_tags,
    with_retry,
)


class FlakyOperation:
    """Fails a fixed number of times, then succeeds."""

    def __init__(self, failures: int, error: Exception, result: str = "ok"):
        self.failures = failures
        self.error = error
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result


class TestWithRetry:
    def setup_method(self):
        self.delays = []

    def sleep(self, seconds):
        self.delays.append(seconds)

    def test_success_first_try(self):
        op = FlakyOperation(0, TranslationError("boom"))
        assert with_retry(op, sleep=self.sleep) == "ok"
        assert op.calls == 1
        assert self.delays == []

    def test_fatal_error_not_retried(self):
        op = FlakyOperation(5, TranslationError("401", ErrorClassification.FATAL))
        with pytest.raises(TranslationError):
            with_retry(op, max_attempts=3, sleep=self.sleep)
        assert op.calls == 1
        assert self.delays == []

    def test_retryable_error_exhausts_attempts(self):
        error = TranslationError("503")
        op = FlakyOperation(10, error)
        with pytest.raises(TranslationError) as exc_info:
            with_retry(op, max_attempts=3, sleep=self.sleep)
        assert exc_info.value is error
        assert op.calls == 3
        assert self.delays == [1.0, 2.0]

    def test_exponential_delays(self):
        op = FlakyOperation(10, TranslationError("503"))
        with pytest.raises(TranslationError):
            with_retry(op, max_attempts=5, sleep=self.sleep)
        assert self.delays == [1.0, 2.0, 4.0, 8.0]

    def test_recovers_after_transient_failure(self):
        op = FlakyOperation(2, TranslationError("timeout"))
        assert with_retry(op, max_attempts=3, sleep=self.sleep) == "ok"
        assert op.calls == 3

    def test_last_error_is_raised(self):
        errors = [TranslationError("first"), TranslationError("second")]

        def op():
            raise errors.pop(0)

        with pytest.raises(TranslationError, match="second"):
            with_retry(op, max_attempts=2, sleep=self.sleep)

    def test_custom_classifier(self):
        op = FlakyOperation(5, ValueError("bad input"))
        with pytest.raises(ValueError):
            with_retry(
                op,
                is_fatal=lambda e: isinstance(e, ValueError),
                sleep=self.sleep,
            )
        assert op.calls == 1

    def test_plain_exceptions_are_retryable_by_default(self):
        op = FlakyOperation(1, ConnectionError("reset"))
        assert with_retry(op, sleep=self.sleep) == "ok"
        assert op.calls == 2

    def test_invalid_max_attempts(self):
        with pytest.raises(ValueError):
            with_retry(lambda: "ok", max_attempts=0)

    def test_backoff_delay(self):
        assert [backoff_delay(k) for k in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_default_sleep_uses_time_sleep(self, monkeypatch):
        monkeypatch.setattr("pdf_html_translator.utils.time.sleep", self.sleep)
        op = FlakyOperation(1, TranslationError("503"))
        assert with_retry(op, max_attempts=3) == "ok"
        assert self.delays == [1.0]


class TestStripCodeFence:
    def test_html_fence(self):
        assert strip_code_fence("```html\n<p>Hi</p>\n```") == "<p>Hi</p>"

    def test_bare_fence(self):
        assert strip_code_fence("```\n<p>Hi</p>\n```") == "<p>Hi</p>"

    def test_uppercase_fence(self):
        assert strip_code_fence("```HTML\n<h1>T</h1>\n```\n") == "<h1>T</h1>"

    def test_unfenced_untouched(self):
        assert strip_code_fence("  <p>Hi</p>  ") == "<p>Hi</p>"


class TestUnescapeInlineTags:
    def test_sup(self):
        assert unescape_inline_tags("E=mc&lt;sup&gt;2&lt;/sup&gt;") == "E=mc<sup>2</sup>"

    def test_all_allowlisted_tags(self):
        for tag in ("sup", "sub", "b", "i", "strong", "em"):
            escaped = f"&lt;{tag}&gt;x&lt;/{tag}&gt;"
            assert unescape_inline_tags(escaped) == f"<{tag}>x</{tag}>"

    def test_case_insensitive(self):
        assert unescape_inline_tags("&lt;SUB&gt;2&lt;/SUB&gt;") == "<SUB>2</SUB>"

    def test_other_tags_stay_escaped(self):
        text = "&lt;script&gt;alert(1)&lt;/script&gt; &lt;span&gt;x&lt;/span&gt;"
        assert unescape_inline_tags(text) == text

    def test_tags_with_attributes_stay_escaped(self):
        text = '&lt;b class="x"&gt;bold&lt;/b&gt;'
        assert unescape_inline_tags(text) == '&lt;b class="x"&gt;bold</b>'

    def test_similar_prefix_not_matched(self):
        text = "&lt;big&gt;x&lt;/big&gt;"
        assert unescape_inline_tags(text) == text


class TestNormalizeHtml:
    def test_fenced_and_escaped(self):
        raw = "```html\n<p>Ref&lt;sup&gt;17&lt;/sup&gt;</p>\n```"
        assert normalize_html(raw) == "<p>Ref<sup>17</sup></p>"
