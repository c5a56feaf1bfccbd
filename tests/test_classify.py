import unittest

from ingest.classify import classify_failure
from ingest.errors import (
    NotFoundError,
    RateLimitedError,
    ForbiddenError,
    UnauthorizedError,
    UpstreamMessageError,
    UpstreamStatusError,
    NoResponseError,
    UnknownError,
    GENERIC_FALLBACK_MESSAGE,
)
from ingest.transport import HttpFailure, NetworkFailure, UnknownFailure


class TestClassifyFailure(unittest.TestCase):
    def test_not_found(self):
        err = classify_failure(HttpFailure(404, {}, {'message': 'Not Found'}))
        self.assertIsInstance(err, NotFoundError)
        self.assertEqual(err.kind, 'not_found')
        self.assertIn('Repository not found', err.message)

    def test_403_with_exhausted_quota_is_rate_limited(self):
        headers = {'X-RateLimit-Remaining': '0', 'X-RateLimit-Reset': '1700000000'}
        err = classify_failure(HttpFailure(403, headers, {'message': 'API rate limit exceeded'}))
        self.assertIsInstance(err, RateLimitedError)
        self.assertEqual(err.reset_at, 1700000000.0)

    def test_rate_limit_header_lookup_ignores_case(self):
        err = classify_failure(HttpFailure(403, {'x-ratelimit-remaining': '0'}, None))
        self.assertIsInstance(err, RateLimitedError)

    def test_403_with_quota_left_or_missing_is_forbidden(self):
        for headers in ({'X-RateLimit-Remaining': '12'}, {}, {'X-RateLimit-Remaining': 'garbage'}):
            with self.subTest(headers=headers):
                err = classify_failure(HttpFailure(403, headers, {'message': 'Resource not accessible'}))
                self.assertIsInstance(err, ForbiddenError)

    def test_unauthorized(self):
        err = classify_failure(HttpFailure(401, {}, {'message': 'Bad credentials'}))
        self.assertIsInstance(err, UnauthorizedError)

    def test_other_status_with_message(self):
        err = classify_failure(HttpFailure(422, {}, {'message': 'Validation Failed'}))
        self.assertIsInstance(err, UpstreamMessageError)
        self.assertEqual(err.message, 'GitHub API error: Validation Failed')
        self.assertEqual(err.status, 422)

    def test_other_status_without_message(self):
        for body in (None, {}, 'Bad Gateway', {'message': ''}):
            with self.subTest(body=body):
                err = classify_failure(HttpFailure(502, {}, body))
                self.assertIsInstance(err, UpstreamStatusError)
                self.assertEqual(err.message, 'GitHub API error (502)')

    def test_network_failure(self):
        err = classify_failure(NetworkFailure('Read timed out'))
        self.assertIsInstance(err, NoResponseError)
        self.assertIn('No response received', err.message)

    def test_unknown_failure_keeps_text(self):
        err = classify_failure(UnknownFailure('Invalid JSON'))
        self.assertIsInstance(err, UnknownError)
        self.assertEqual(err.message, 'Invalid JSON')

    def test_unknown_failure_without_text_uses_fallback(self):
        err = classify_failure(UnknownFailure())
        self.assertEqual(err.message, GENERIC_FALLBACK_MESSAGE)

    def test_classified_error_passes_through(self):
        original = ForbiddenError()
        self.assertIs(classify_failure(original), original)


if __name__ == '__main__':
    unittest.main()
