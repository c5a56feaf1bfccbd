import unittest

from ingest.errors import InvalidIdentifierError
from ingest.identifiers import normalize_identifiers, normalize_repo, parse_repository_reference


class TestNormalizeIdentifiers(unittest.TestCase):
    def test_strips_trailing_slash_and_git_suffix(self):
        self.assertEqual(normalize_repo('owner/'), 'owner')
        self.assertEqual(normalize_repo('owner.git'), 'owner')
        self.assertEqual(normalize_repo('https://host/owner/repo.git/'), 'repo')
        self.assertEqual(normalize_repo('Hello-World.git/'), 'Hello-World')

    def test_trims_whitespace(self):
        self.assertEqual(normalize_identifiers('  octocat ', ' Hello-World \n'), ('octocat', 'Hello-World'))

    def test_owner_url_keeps_last_segment(self):
        self.assertEqual(normalize_identifiers('https://github.com/octocat/', 'Hello-World'), ('octocat', 'Hello-World'))

    def test_dotted_repo_names_survive(self):
        self.assertEqual(normalize_identifiers('vercel', 'next.js'), ('vercel', 'next.js'))

    def test_empty_components_raise(self):
        for owner, repo in [('', 'repo'), ('owner', ''), ('   ', 'repo'), ('owner', '.git'), ('owner', '/'), (None, 'repo')]:
            with self.subTest(owner=owner, repo=repo):
                with self.assertRaises(InvalidIdentifierError):
                    normalize_identifiers(owner, repo)

    def test_invalid_identifier_is_value_error(self):
        with self.assertRaises(ValueError):
            normalize_identifiers('', '')


class TestParseRepositoryReference(unittest.TestCase):
    def test_reference_forms(self):
        cases = [
            'octocat/Hello-World',
            'github.com/octocat/Hello-World',
            'https://github.com/octocat/Hello-World',
            'https://github.com/octocat/Hello-World.git/',
            'git@github.com:octocat/Hello-World.git',
            'https://github.com/octocat/Hello-World/tree/main',
            ' octocat/Hello-World/ ',
        ]
        for ref in cases:
            with self.subTest(ref=ref):
                self.assertEqual(parse_repository_reference(ref), ('octocat', 'Hello-World'))

    def test_single_segment_is_rejected(self):
        for ref in ['octocat', '', 'https://github.com/', '   ', 'https://github.com/octocat', 'github.com/octocat']:
            with self.subTest(ref=ref):
                with self.assertRaises(InvalidIdentifierError):
                    parse_repository_reference(ref)


if __name__ == '__main__':
    unittest.main()
