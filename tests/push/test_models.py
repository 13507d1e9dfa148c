import dataclasses
import unittest

from multi_repo_pusher.push.models import Outcome, PushReport, PushResult, RemoteTarget, RunConfig
from multi_repo_pusher.vcs.errors import FailureKind


class TestModels(unittest.TestCase):
    def test_run_config_defaults(self) -> None:
        config = RunConfig()
        self.assertEqual(config.message, "Auto commit")
        self.assertEqual(config.branch, "main")
        self.assertFalse(config.allow_empty)

    def test_values_are_immutable(self) -> None:
        target = RemoteTarget(name="github", url="https://github.com/me/x.git")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            target.url = "https://elsewhere/x.git"
        result = PushResult.success(target)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            result.outcome = Outcome.FAILURE

    def test_failure_defaults_to_unknown_kind(self) -> None:
        result = PushResult.failure(RemoteTarget("a", "https://a/x.git"), "boom")
        self.assertFalse(result.ok)
        self.assertEqual(result.kind, FailureKind.UNKNOWN)
        self.assertEqual(result.reason, "boom")

    def test_report_without_results_succeeds(self) -> None:
        self.assertTrue(PushReport(commit_id="abc").succeeded)

    def test_report_with_a_failure_does_not_succeed(self) -> None:
        a = RemoteTarget("a", "https://a/x.git")
        b = RemoteTarget("b", "https://b/x.git")
        report = PushReport(commit_id="abc", results=(PushResult.success(a), PushResult.failure(b, "nope")))
        self.assertFalse(report.succeeded)
        self.assertEqual([r.target for r in report.failures], [b])


if __name__ == "__main__":
    unittest.main()
