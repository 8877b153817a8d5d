"""Tests for the native mobile analyzer."""

import pytest

from cntxtmap.analyzers.react_native import ReactNativeAnalyzer, format_name


@pytest.fixture
def mobile_project(make_tree):
    return make_tree({
        "package.json": {"dependencies": {"react-native": "0.74", "react": "18"}},
        "app.json": {"name": "demo"},
        "src/screens/HomeScreen.tsx": "import Avatar from '../components/Avatar';",
        "src/screens/ProfileScreen.tsx": "import Avatar from '../components/Avatar';",
        "src/components/Avatar.tsx": "export default function Avatar() {}",
        "src/navigation/AppNavigation.tsx": """\
            import HomeScreen from '../screens/HomeScreen';
            import ProfileScreen from '../screens/ProfileScreen';

            export default function AppNavigation() {
              return (
                <Stack.Navigator>
                  <Stack.Screen name="Home" component={HomeScreen} />
                  <Stack.Screen
                    component={ProfileScreen}
                    name="Profile"
                  />
                  <Tab.Screen name="Settings" component={SettingsScreen} />
                </Stack.Navigator>
              );
            }
            """,
    })


def test_format_name():
    assert format_name("HomeScreen", "screen") == "Home"
    assert format_name("AppNavigation", "navigation") == "App"
    assert format_name("Avatar", "component") == "Avatar"


class TestReactNativeAnalyzer:
    def test_screens_and_navigation(self, mobile_project, ctx):
        root = str(mobile_project)
        fragment = ReactNativeAnalyzer(ctx).analyze(root)
        nodes = {n.id: n for n in fragment.nodes}

        assert nodes[f"react-native:{root}"].name == "React Native App"
        assert nodes[f"{root}/src/screens/HomeScreen.tsx"].name == "Home"
        assert nodes[f"{root}/src/navigation/AppNavigation.tsx"].type == "navigation"

        structure = {(l.source, l.target) for l in fragment.links if l.type == "screen-structure"}
        assert (f"{root}/src/screens/HomeScreen.tsx", f"react-native:{root}") in structure

    def test_navigation_routes_target_screens(self, mobile_project, ctx):
        root = str(mobile_project)
        fragment = ReactNativeAnalyzer(ctx).analyze(root)
        nav = f"{root}/src/navigation/AppNavigation.tsx"
        routes = [l.target for l in fragment.links if l.type == "navigation-route" and l.source == nav]
        assert routes == [
            f"{root}/src/screens/HomeScreen.tsx",
            f"{root}/src/screens/ProfileScreen.tsx",
            "Settings",
        ]

    def test_component_shared_by_screens(self, mobile_project, ctx):
        root = str(mobile_project)
        fragment = ReactNativeAnalyzer(ctx).analyze(root)
        avatar = f"{root}/src/components/Avatar.tsx"
        assert [n.id for n in fragment.nodes].count(avatar) == 1
        assert sum(1 for l in fragment.links if l.type == "imports" and l.target == avatar) == 2
        assert next(n for n in fragment.nodes if n.id == avatar).radius == 15
