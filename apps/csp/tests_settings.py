import importlib
import os
from unittest import mock

from django.test import SimpleTestCase

from config.settings import base


def load(module_name):
    # The environment settings mutate the base CSP dict, so reload base first.
    importlib.reload(base)
    return importlib.reload(importlib.import_module(module_name))


class SettingsPolicySwitchTest(SimpleTestCase):
    """Ensure the policy stays off unless an environment opts in."""

    def setUp(self):
        self.addCleanup(importlib.reload, base)

    def test_base_disabled_without_environment(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertIs(load('config.settings.base').CSP['ENABLED'], False)

    def test_development_enabled_by_default(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load('config.settings.development')
        self.assertIs(settings.CSP['ENABLED'], True)
        self.assertIs(settings.CSP['REPORT_ONLY'], True)

    def test_production_enabled_by_default(self):
        with mock.patch.dict(os.environ, {'DJANGO_SECRET_KEY': 'test'}, clear=True):
            self.assertIs(load('config.settings.production').CSP['ENABLED'], True)

    def test_environment_can_switch_policy_off(self):
        with mock.patch.dict(os.environ, {'CSP_ENABLED': 'false'}, clear=True):
            self.assertIs(load('config.settings.development').CSP['ENABLED'], False)

    def test_env_flag(self):
        with mock.patch.dict(os.environ, {'FLAG_ON': 'True', 'FLAG_OFF': 'no'}, clear=True):
            self.assertIs(base.env_flag('FLAG_ON'), True)
            self.assertIs(base.env_flag('FLAG_OFF'), False)
            self.assertIs(base.env_flag('FLAG_MISSING'), False)
            self.assertIs(base.env_flag('FLAG_MISSING', 'true'), True)
