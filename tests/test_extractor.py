"""Tests for import specifier extraction.

Covers: CommonJS requires, ES imports (from, side effect, dynamic),
stylesheet imports, alias-rooted specifiers, the local filter and the
non-JS ecosystem syntaxes used by the generic analyzer.
"""

import textwrap

from cntxtmap.extractor import (
    GENERIC_PATTERNS,
    ImportExtractor,
    syntax_for,
)


class TestImportExtractor:
    def _extract(self, source, **kwargs):
        return ImportExtractor(**kwargs).extract(textwrap.dedent(source))

    def test_require(self):
        assert self._extract("const db = require('./db');") == {"./db"}

    def test_es_from_forms(self):
        source = """\
        import React from 'react';
        import { Button } from "./Button";
        import * as utils from '../utils';
        export { helper } from './helper';
        """
        assert self._extract(source) == {"./Button", "../utils", "./helper"}

    def test_side_effect_and_dynamic(self):
        source = """\
        import './polyfills';
        const Page = lazy(() => import('./pages/Lazy'));
        """
        assert self._extract(source) == {"./polyfills", "./pages/Lazy"}

    def test_alias_prefix(self):
        assert self._extract("import Card from '@/components/Card';") == {"@/components/Card"}

    def test_custom_alias_prefix(self):
        found = self._extract("import Card from '~/components/Card';", alias_prefix="~/")
        assert found == {"~/components/Card"}

    def test_scoped_package_is_not_alias(self):
        assert self._extract("import x from '@scope/pkg';") == set()

    def test_bare_packages_excluded(self):
        source = """\
        const express = require('express');
        import lodash from 'lodash';
        """
        assert self._extract(source) == set()

    def test_style_imports(self):
        source = """\
        @import './theme.css';
        @import url("../base.css");
        .hero { background: url('./hero.png'); }
        """
        assert self._extract(source) == {"./theme.css", "../base.css", "./hero.png"}

    def test_protocol_relative_url_excluded(self):
        assert self._extract("a { background: url('//cdn.example.com/x.png'); }") == set()

    def test_link_href_only_in_generic_patterns(self):
        source = '<link rel="stylesheet" href="./styles.css">'
        assert self._extract(source) == set()
        assert self._extract(source, patterns=GENERIC_PATTERNS) == {"./styles.css"}

    def test_duplicates_collapse(self):
        source = """\
        import a from './a';
        const again = require('./a');
        """
        assert self._extract(source) == {"./a"}

    def test_malformed_input_does_not_raise(self):
        assert self._extract("import from ; require( ; @import") == set()


class TestEcosystemSyntax:
    def test_python(self):
        source = textwrap.dedent("""\
        import os
        from .models import User
        from app.core import settings
        """)
        assert syntax_for("python").extract(source) == {"os", ".models", "app.core"}

    def test_java_skips_wildcards(self):
        source = textwrap.dedent("""\
        import com.acme.service.UserService;
        import static com.acme.util.Strings.trim;
        import com.acme.model.*;
        """)
        assert syntax_for("java").extract(source) == {
            "com.acme.service.UserService",
            "com.acme.util.Strings.trim",
        }

    def test_php(self):
        source = "<?php\nuse App\\Models\\User;\n"
        assert syntax_for("php").extract(source) == {"App\\Models\\User"}

    def test_ruby(self):
        assert syntax_for("ruby").extract("require_relative 'lib/helper'") == {"lib/helper"}

    def test_unknown_ecosystem(self):
        assert syntax_for("go") is None
        assert syntax_for(None) is None
