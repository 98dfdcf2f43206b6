import os
import shutil
import tempfile
import unittest

from page_builder import (
    FALLBACK_TEMPLATE,
    apply_template,
    build_list_page,
    build_project_content,
    build_project_page,
    is_selected,
    load_template,
    render_sidebar,
)
from project_info import ProjectInfo, ProjectLink
from project_tree import parse_project_tree


TREE = parse_project_tree({
    "project_tree": [
        {
            "name": "Game Design",
            "path": "/projects/game_design",
            "children": [
                {"name": "Convoy", "path": "/projects/game_design/convoy"},
            ],
        },
        {"name": "Art & Tech", "path": "/projects/art/"},
    ]
})

TEMPLATE = "<title>{{TITLE}}</title><aside>{{SIDEBAR}}</aside><main>{{CONTENT}}</main>"


class TemplateDirMixin:
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.template_path = os.path.join(self.test_dir, "projectpage.html")
        with open(self.template_path, "w", encoding="utf-8") as f:
            f.write(TEMPLATE)

    def tearDown(self):
        shutil.rmtree(self.test_dir)


class TestTemplate(TemplateDirMixin, unittest.TestCase):
    def test_load_existing_template(self):
        self.assertEqual(load_template(self.template_path), TEMPLATE)

    def test_missing_template_falls_back_with_warning(self):
        missing = os.path.join(self.test_dir, "missing.html")
        with self.assertLogs("showcase.pages", level="WARNING") as cm:
            tpl = load_template(missing)
        self.assertEqual(tpl, FALLBACK_TEMPLATE)
        self.assertIn("missing.html", cm.output[0])

    def test_title_is_escaped(self):
        out = apply_template(TEMPLATE, "<b>x</b>", "", "")
        self.assertIn("<title>&lt;b&gt;x&lt;/b&gt;</title>", out)

    def test_substitution_is_not_recursive(self):
        out = apply_template(TEMPLATE, "{{SIDEBAR}}", "{{CONTENT}}", "{{TITLE}}")
        self.assertEqual(
            out,
            "<title>{{SIDEBAR}}</title><aside>{{CONTENT}}</aside><main>{{TITLE}}</main>",
        )

    def test_every_token_occurrence_replaced(self):
        out = apply_template("{{TITLE}}|{{TITLE}}", "T", "", "")
        self.assertEqual(out, "T|T")


class TestSidebar(unittest.TestCase):
    def test_structure_and_trailing_slash(self):
        html = render_sidebar(TREE, "/projects/", "")
        self.assertTrue(html.startswith('<nav class="sidebar-nav"><ul class="project-list level-0">'))
        self.assertIn('<li class="project-node has-children">', html)
        self.assertIn('<ul class="project-list level-1">', html)
        self.assertIn('href="/projects/game_design/convoy/"', html)
        # trailing slash in source is not doubled
        self.assertIn('href="/projects/art/"', html)
        self.assertIn(">Art &amp; Tech</a>", html)
        self.assertNotIn("selected", html)

    def test_selected_by_canonical_path(self):
        html = render_sidebar(TREE, "/projects/game_design/convoy/", "game_design/convoy")
        self.assertIn('<a class="project-link selected" href="/projects/game_design/convoy/"', html)
        self.assertEqual(html.count("selected"), 1)

    def test_is_selected_by_relative_path(self):
        self.assertTrue(is_selected("/other/mount/convoy", "game_design/convoy", "/projects/game_design/convoy"))
        self.assertTrue(is_selected("/projects/art", "art", "/projects/art/"))
        self.assertFalse(is_selected("/projects/game_design/", "game_design", "/projects/game_design/convoy"))


class TestProjectContent(unittest.TestCase):
    def test_only_heading_when_only_name(self):
        self.assertEqual(build_project_content(ProjectInfo(name="X"), ""), '<h1 class="project-title">X</h1>')

    def test_empty_info_renders_nothing(self):
        self.assertEqual(build_project_content(ProjectInfo(), ""), "")

    def test_heading_omitted_without_name(self):
        html = build_project_content(ProjectInfo(name="", description="d"), "")
        self.assertEqual(html, '<p class="project-description">d</p>')
        self.assertNotIn("project-title", html)

    def test_block_order(self):
        info = ProjectInfo(
            name="Convoy",
            description="desc",
            state="WIP",
            tools=["Unity"],
            images=["a.png"],
            videos=["a.mp4"],
            links=[ProjectLink("https://e.com", "Site")],
        )
        html = build_project_content(info, "# Body")
        markers = [
            'class="project-title"',
            'class="project-description"',
            'class="state-box project-state"',
            'class="project-videos"',
            'class="project-images"',
            'class="project-content"',
            'class="meta-grid"',
        ]
        positions = [html.index(m) for m in markers]
        self.assertEqual(positions, sorted(positions))
        self.assertIn('<h1 class="md-h1">Body</h1>', html)
        self.assertIn('<video class="video-item" controls preload="metadata" src="a.mp4"></video>', html)
        self.assertIn('<img class="image-item" src="a.png" alt="" loading="lazy"/>', html)

    def test_blank_markdown_omitted(self):
        html = build_project_content(ProjectInfo(name="X"), "  \n ")
        self.assertNotIn("project-content", html)

    def test_meta_grid_with_links_only(self):
        info = ProjectInfo(name="X", links=[ProjectLink("/rel", "Docs")])
        html = build_project_content(info, "")
        self.assertIn('<section class="meta-grid">', html)
        self.assertNotIn(">Tools<", html)
        self.assertIn('<a class="link" href="/rel" target="_blank" rel="noopener">Docs</a>', html)

    def test_meta_grid_with_tools_only(self):
        html = build_project_content(ProjectInfo(name="X", tools=["Blender"]), "")
        self.assertIn('<td class="cell-value">Blender</td>', html)
        self.assertNotIn(">Links<", html)

    def test_values_are_escaped(self):
        info = ProjectInfo(name="<X>", description="a & b", state='"s"')
        html = build_project_content(info, "")
        self.assertIn("&lt;X&gt;", html)
        self.assertIn("a &amp; b", html)
        self.assertIn("&quot;s&quot;", html)


class TestPages(TemplateDirMixin, unittest.TestCase):
    def test_list_page(self):
        html = build_list_page(TREE, "/projects/", "", self.template_path)
        self.assertTrue(html.startswith("<title>Projects</title><aside><nav"))
        self.assertTrue(html.endswith("<main></main>"))

    def test_project_page_title_and_content(self):
        info = ProjectInfo(name="Convoy", description="d")
        html = build_project_page(TREE, "/projects/game_design/convoy/", "game_design/convoy", info, "", self.template_path)
        self.assertIn("<title>Convoy</title>", html)
        self.assertIn('<main><h1 class="project-title">Convoy</h1><p class="project-description">d</p></main>', html)

    def test_project_page_is_idempotent(self):
        info = ProjectInfo(name="Convoy", tools=["Unity"], links=[ProjectLink("https://e.com", "e")])
        args = (TREE, "/projects/game_design/convoy/", "game_design/convoy", info, "## Hi\n\n- [x] a")
        self.assertEqual(
            build_project_page(*args, self.template_path),
            build_project_page(*args, self.template_path),
        )

    def test_page_renders_with_fallback_template(self):
        with self.assertLogs("showcase.pages", level="WARNING"):
            html = build_list_page(TREE, "/projects/", "", os.path.join(self.test_dir, "gone.html"))
        self.assertIn("<title>Projects</title>", html)
        self.assertIn('<div class="sidebar"><nav class="sidebar-nav">', html)


if __name__ == "__main__":
    unittest.main()
