import unittest

import resolver
from project_tree import parse_project_tree


TREE = parse_project_tree({
    "project_tree": [
        {
            "name": "A",
            "path": "/projects/a",
            "children": [
                {"name": "B", "path": "/projects/a/b"},
            ],
        },
        {"name": "AB", "path": "/projects/ab"},
        {"name": "Dup one", "path": "/projects/dup"},
        {"name": "Dup two", "path": "/projects/dup"},
    ]
})

PREFIX = "/projects"


class TestPathMatches(unittest.TestCase):
    def test_exact(self):
        self.assertTrue(resolver.path_matches("/projects/a", "/projects/a"))

    def test_prefix_on_slash_boundary(self):
        self.assertTrue(resolver.path_matches("/projects/a/b/", "/projects/a"))

    def test_substring_is_not_a_match(self):
        self.assertFalse(resolver.path_matches("/projects/ab", "/projects/a"))

    def test_longer_node_does_not_match(self):
        self.assertFalse(resolver.path_matches("/projects/a", "/projects/a/b"))


class TestFindLongestMatch(unittest.TestCase):
    def test_longest_prefix_wins(self):
        self.assertEqual(resolver.find_longest_match(TREE, "/projects/a/b/").path, "/projects/a/b")

    def test_parent_when_child_absent(self):
        self.assertEqual(resolver.find_longest_match(TREE, "/projects/a/c/").path, "/projects/a")

    def test_no_substring_match(self):
        self.assertEqual(resolver.find_longest_match(TREE, "/projects/ab/").name, "AB")
        self.assertIsNone(resolver.find_longest_match(TREE, "/projects/abc"))

    def test_first_seen_wins_on_equal_length(self):
        self.assertEqual(resolver.find_longest_match(TREE, "/projects/dup/").name, "Dup one")


class TestResolve(unittest.TestCase):
    def test_root(self):
        for path in ("/projects", "/projects/", "/projects//"):
            res = resolver.resolve(TREE, path, PREFIX)
            self.assertEqual(res.state, resolver.ROOT, path)
            self.assertEqual(res.request_rel, "")

    def test_no_match(self):
        res = resolver.resolve(TREE, "/projects/zzz/", PREFIX)
        self.assertEqual(res.state, resolver.NO_MATCH)

    def test_remainder_is_not_found(self):
        res = resolver.resolve(TREE, "/projects/a/b/image.png", PREFIX)
        self.assertEqual(res.state, resolver.NOT_FOUND)
        self.assertEqual(res.node.path, "/projects/a/b")

    def test_redirect_without_trailing_slash(self):
        res = resolver.resolve(TREE, "/projects/a/b", PREFIX)
        self.assertEqual(res.state, resolver.REDIRECT)
        self.assertEqual(res.location, "/projects/a/b/")

    def test_render(self):
        res = resolver.resolve(TREE, "/projects/a/b/", PREFIX)
        self.assertEqual(res.state, resolver.RENDER)
        self.assertEqual(res.node.path, "/projects/a/b")
        self.assertEqual(res.project_rel, "a/b")
        self.assertEqual(res.request_rel, "a/b")

    def test_relative_request_path(self):
        self.assertEqual(resolver.relative_request_path("/projects/a/b/", PREFIX), "a/b")
        self.assertEqual(resolver.relative_request_path("/projects", PREFIX), "")

    def test_strip_prefix(self):
        self.assertEqual(resolver.strip_prefix("/projects/a/b", PREFIX), "/a/b")
        self.assertEqual(resolver.strip_prefix("/other/a", PREFIX), "/other/a")
        self.assertEqual(resolver.strip_prefix("/projects/a", ""), "/projects/a")


if __name__ == "__main__":
    unittest.main()
