"""Tests for the app-router analyzer: route names, nested layouts, imports."""

import pytest

from cntxtmap.analyzers.nextjs import NextjsAnalyzer, route_from_path, route_segment


def _links(fragment, link_type=None):
    return {(l.source, l.target) for l in fragment.links if link_type is None or l.type == link_type}


def _by_id(fragment):
    return {n.id: n for n in fragment.nodes}


class TestRouteFromPath:
    @pytest.mark.parametrize("relative_dir, expected", [
        (".", "/"),
        ("about", "/about"),
        ("blog/[slug]", "/blog/:slug"),
        ("(marketing)/pricing", "/pricing"),
        ("docs/[...all]", "/docs/*"),
        ("shop/[[...filters]]", "/shop/*"),
        ("(group)", "/"),
    ])
    def test_routes(self, relative_dir, expected):
        assert route_from_path(relative_dir) == expected

    def test_segment_group_dropped(self):
        assert route_segment("(auth)") is None


@pytest.fixture
def app_router_project(make_tree):
    return make_tree({
        "package.json": {"dependencies": {"next": "14", "react": "18"}},
        "app/layout.tsx": "export default function RootLayout() {}",
        "app/page.tsx": "import Hero from '@/components/Hero';",
        "app/(marketing)/blog/[slug]/page.tsx": "export default function Post() {}",
        "app/dashboard/layout.tsx": "export default function DashboardLayout() {}",
        "app/dashboard/page.tsx": "import Card from '@/components/Card';\nimport Hero from '../../components/Hero';",
        "app/dashboard/settings/page.tsx": "export default function Settings() {}",
        "app/_private/page.tsx": "export default function Hidden() {}",
        "components/Hero.tsx": "export default function Hero() {}",
        "components/Card.tsx": "import { cn } from '@/lib/cn';",
        "lib/cn.ts": "export const cn = () => '';",
    })


class TestAppRouter:
    def test_structure(self, app_router_project, ctx):
        root = str(app_router_project)
        fragment = NextjsAnalyzer(ctx).analyze(root)
        nodes = _by_id(fragment)
        app_id = f"nextjs:{root}"
        root_layout = f"{root}/app/layout.tsx"
        dash_layout = f"{root}/app/dashboard/layout.tsx"

        assert nodes[app_id].type == "application"
        assert nodes[root_layout].type == "layout"
        assert (root_layout, app_id) in _links(fragment, "layout-structure")
        assert (dash_layout, root_layout) in _links(fragment, "layout-structure")

        uses_layout = _links(fragment, "uses-layout")
        assert (f"{root}/app/page.tsx", root_layout) in uses_layout
        assert (f"{root}/app/(marketing)/blog/[slug]/page.tsx", root_layout) in uses_layout
        assert (f"{root}/app/dashboard/page.tsx", dash_layout) in uses_layout
        assert (f"{root}/app/dashboard/settings/page.tsx", dash_layout) in uses_layout

    def test_page_names_are_routes(self, app_router_project, ctx):
        root = str(app_router_project)
        fragment = NextjsAnalyzer(ctx).analyze(root)
        names = sorted(n.name for n in fragment.nodes if n.type == "page")
        assert names == ["/", "/blog/:slug", "/dashboard", "/dashboard/settings"]

    def test_private_folders_skipped(self, app_router_project, ctx):
        fragment = NextjsAnalyzer(ctx).analyze(str(app_router_project))
        assert not any("_private" in str(n.id) for n in fragment.nodes)

    def test_imports_pulled_once(self, app_router_project, ctx):
        root = str(app_router_project)
        fragment = NextjsAnalyzer(ctx).analyze(root)
        hero = f"{root}/components/Hero.tsx"

        assert [n.id for n in fragment.nodes].count(hero) == 1
        imports = _links(fragment, "imports")
        assert (f"{root}/app/page.tsx", hero) in imports
        assert (f"{root}/app/dashboard/page.tsx", hero) in imports
        assert (f"{root}/components/Card.tsx", f"{root}/lib/cn.ts") in imports
        assert _by_id(fragment)[hero].type == "component"

    def test_no_layout_links_page_to_app(self, make_tree, ctx):
        root = str(make_tree({"src/app/page.jsx": "export default 1;"}))
        fragment = NextjsAnalyzer(ctx).analyze(root)
        assert _links(fragment, "route") == {(f"{root}/src/app/page.jsx", f"nextjs:{root}")}

    def test_content_omitted_when_disabled(self, app_router_project):
        from cntxtmap.config import ScanConfig
        from cntxtmap.context import ScanContext

        with ScanContext(ScanConfig(include_content=False)) as context:
            fragment = NextjsAnalyzer(context).analyze(str(app_router_project))
        assert all(n.content is None for n in fragment.nodes)


class TestPagesRouter:
    def test_pages_directory(self, make_tree, ctx):
        root = str(make_tree({
            "pages/_app.tsx": "export default function App() {}",
            "pages/index.tsx": "",
            "pages/about.tsx": "",
            "pages/blog/[id].tsx": "",
        }))
        fragment = NextjsAnalyzer(ctx).analyze(root)
        app_layout = f"{root}/pages/_app.tsx"

        pages = {n.name: n.id for n in fragment.nodes if n.type == "page"}
        assert sorted(pages) == ["/", "/about", "/blog/:id"]
        assert (app_layout, f"nextjs:{root}") in _links(fragment, "layout-structure")
        assert _links(fragment, "uses-layout") == {(page_id, app_layout) for page_id in pages.values()}
