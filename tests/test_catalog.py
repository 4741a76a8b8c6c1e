"""Tests for desired-state catalog construction."""

import re
import unittest

from ivanti_hostconfig.catalog import (
    PACKAGES,
    SUDOERS_PATH,
    SUDOERS_PATTERN,
    SUDOERS_RULE,
    SUPPORTED_OS,
    build_catalog,
    sudoers_rule,
)
from ivanti_hostconfig.errors import CatalogError, DuplicateResource, UnsupportedPlatform
from ivanti_hostconfig.models import Ensure, Facts, FileResource, PackageResource, SudoersSettings

EXPECTED_PACKAGES = [
    "ivanti-software-distribution",
    "ivanti-base-agent",
    "ivanti-pds2",
    "ivanti-schedule",
    "ivanti-inventory",
    "ivanti-vulnerability",
    "ivanti-cba8",
]

# Acceptance check applied to the compiled catalog; \s also admits tabs.
ACCEPTANCE_RE = re.compile(r"^landesk\s+ALL=\(ALL\)\s+NOPASSWD:\s+ALL$", re.MULTILINE)


def _supported_facts():
    for family, versions in SUPPORTED_OS.items():
        for version in versions:
            yield Facts(os_family=family, os_version=version)


class CatalogCompletenessTests(unittest.TestCase):

    def test_every_supported_os_compiles(self):
        for facts in _supported_facts():
            with self.subTest(os=f"{facts.os_family}-{facts.os_version}"):
                catalog = build_catalog(facts)
                self.assertEqual(len(catalog.resources), 8)

    def test_packages_installed(self):
        for facts in _supported_facts():
            catalog = build_catalog(facts)
            self.assertEqual([p.name for p in catalog.packages], EXPECTED_PACKAGES)
            for pkg in catalog.packages:
                self.assertEqual(pkg.ensure, Ensure.INSTALLED)

    def test_single_sudoers_file(self):
        catalog = build_catalog(Facts(os_family="RedHat", os_version="8"))
        self.assertEqual(len(catalog.files), 1)
        sudoers = catalog.files[0]
        self.assertEqual(sudoers.path, "/etc/sudoers.d/10_landesk")
        self.assertEqual(sudoers.mode, 0o440)
        self.assertEqual(sudoers.owner, "root")

    def test_packages_precede_file(self):
        catalog = build_catalog(Facts(os_family="Debian", os_version="22.04"))
        self.assertIsInstance(catalog.resources[-1], FileResource)
        self.assertTrue(all(isinstance(r, PackageResource) for r in catalog.resources[:-1]))

    def test_resource_ids(self):
        catalog = build_catalog(Facts(os_family="Suse", os_version="15"))
        ids = catalog.resource_ids()
        self.assertIn("Package[ivanti-pds2]", ids)
        self.assertIn(f"File[{SUDOERS_PATH}]", ids)


class CatalogContentTests(unittest.TestCase):

    def test_rendered_sudoers_matches_acceptance_pattern(self):
        for facts in _supported_facts():
            content = build_catalog(facts).files[0].content.render()
            self.assertRegex(content, ACCEPTANCE_RE)

    def test_rendered_content_satisfies_its_own_pattern(self):
        content = build_catalog(Facts(os_family="RedHat", os_version="9")).files[0].content
        self.assertTrue(content.matches(content.render()))
        self.assertEqual(content.pattern, SUDOERS_PATTERN)

    def test_rendered_content_ends_with_newline(self):
        content = build_catalog(Facts(os_family="RedHat", os_version="9")).files[0].content.render()
        self.assertTrue(content.endswith("\n"))


class CatalogDeterminismTests(unittest.TestCase):

    def test_same_facts_same_catalog(self):
        facts = Facts(os_family="RedHat", os_version="8")
        self.assertEqual(build_catalog(facts), build_catalog(facts))

    def test_catalog_independent_of_facts(self):
        rh = build_catalog(Facts(os_family="RedHat", os_version="7"))
        deb = build_catalog(Facts(os_family="Debian", os_version="12"))
        self.assertEqual(rh.resources, deb.resources)

    def test_constant_table_not_mutated(self):
        before = [(name, dict(attrs)) for name, attrs in PACKAGES]
        build_catalog(Facts(os_family="RedHat", os_version="8"))
        self.assertEqual([(name, dict(attrs)) for name, attrs in PACKAGES], before)


class CatalogErrorTests(unittest.TestCase):

    def test_unsupported_family(self):
        with self.assertRaises(UnsupportedPlatform) as cm:
            build_catalog(Facts(os_family="unsupported-os", os_version="1"))
        self.assertEqual(cm.exception.os_family, "unsupported-os")
        self.assertIn("RedHat", str(cm.exception))
        self.assertIsInstance(cm.exception, CatalogError)

    def test_family_is_case_sensitive(self):
        with self.assertRaises(UnsupportedPlatform):
            build_catalog(Facts(os_family="redhat", os_version="8"))

    def test_untested_version_is_accepted_with_warning(self):
        with self.assertLogs("ivanti_hostconfig.catalog", level="WARNING") as logs:
            catalog = build_catalog(Facts(os_family="RedHat", os_version="10"))
        self.assertEqual(len(catalog.resources), 8)
        self.assertIn("not a tested release", logs.output[0])

    def test_minor_version_counts_as_major(self):
        with self.assertNoLogs("ivanti_hostconfig.catalog", level="WARNING"):
            build_catalog(Facts(os_family="RedHat", os_version="8.9"))

    def test_duplicate_package(self):
        packages = PACKAGES + (("ivanti-pds2", {"ensure": "installed"}),)
        with self.assertRaises(DuplicateResource) as cm:
            build_catalog(Facts(os_family="RedHat", os_version="8"), packages=packages)
        self.assertEqual(cm.exception.resource_id, "Package[ivanti-pds2]")

    def test_empty_facts_rejected(self):
        from pydantic import ValidationError

        with self.assertRaises(ValidationError):
            Facts(os_family="", os_version="8")

    def test_custom_sudoers_rule_used(self):
        rule = {**SUDOERS_RULE, "path": "/tmp/sudoers.d/10_landesk"}
        catalog = build_catalog(Facts(os_family="RedHat", os_version="8"), sudoers=rule)
        self.assertEqual(catalog.files[0].path, "/tmp/sudoers.d/10_landesk")

    def test_default_sudoers_settings_give_default_rule(self):
        self.assertEqual(sudoers_rule(**SudoersSettings().model_dump()), SUDOERS_RULE)

    def test_sudoers_rule_for_other_account(self):
        rule = sudoers_rule(account="svc.agent", path="/etc/sudoers.d/20_agent", mode=0o400)
        sudoers = build_catalog(Facts(os_family="Debian", os_version="12"), sudoers=rule).files[0]
        self.assertEqual(sudoers.path, "/etc/sudoers.d/20_agent")
        self.assertEqual(sudoers.mode, 0o400)
        rendered = sudoers.content.render()
        self.assertIn("svc.agent ALL=(ALL)", rendered)
        self.assertTrue(sudoers.content.matches(rendered))
        # The account name is matched literally.
        self.assertFalse(sudoers.content.matches("svcXagent ALL=(ALL) NOPASSWD: ALL\n"))
        self.assertFalse(sudoers.content.matches("landesk ALL=(ALL) NOPASSWD: ALL\n"))
