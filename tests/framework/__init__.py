"""Helpers for asserting what API calls put on the wire."""

from .api_calls import CallRecorder, assert_same_call
from .expect_json import expect_json
from .url_tester import UrlTester

__all__ = ["CallRecorder", "UrlTester", "assert_same_call", "expect_json"]
