# test_orchestrator.py
import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import report_builder
from config import GlobalConfig
from context import RunContext
from data_sources.factory import get_data_source
from data_sources.local_git import LocalGitDataSource
from data_sources.log_file import LogFileDataSource
from git_utils import build_git_log_args
from models import HeaderShape
from orchestrator import StatsOrchestrator
from stats_aggregator import aggregate
import log_parser

HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40

REPO_LOG = (
    f"{HASH_A} 'Alice' alice@example.com 2024-01-02 10:00:00 fix: login crash AIG: 0.5\n"
    "details of the fix\n"
    "10\t2\tsrc/login.ts\n"
    "30\t30\tapi/login.pb.go\n"
    "\n"
    f"{HASH_B} 'Bob Smith' bob@example.com 2024-01-03 11:00:00 feat: dashboard \n"
    "8\t0\tweb/Dashboard.vue\n"
    "-\t-\tweb/logo.png\n"
    "\n"
    f"{HASH_C} 'Alice' alice@example.com 2024-01-04 12:00:00 refactor: api AIG: 1\n"
    "4\t4\tapi/server.go\n"
)


def make_context(tmp_dir, shape=HeaderShape.WITH_EMAIL, log_file=None, html=False, quiet=False, author=None):
    return RunContext(
        repo_path=tmp_dir,
        log_file=log_file,
        shape=shape,
        author=author,
        since="2024-01-01",
        until="2024-01-15",
        output_dir=os.path.join(tmp_dir, "out"),
        html=html,
        quiet=quiet,
        global_config=GlobalConfig(),
    )


class TestStatsOrchestrator(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.log_path = os.path.join(self.tmp.name, "git.log")
        with open(self.log_path, "w", encoding="utf-8") as f:
            f.write(REPO_LOG)

    def tearDown(self):
        self.tmp.cleanup()

    def run_orchestrator(self, context):
        orchestrator = StatsOrchestrator(context)
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            ok = orchestrator.run()
        return orchestrator, ok, buffer.getvalue()

    def test_repo_mode_from_log_file(self):
        context = make_context(self.tmp.name, log_file=self.log_path)
        orchestrator, ok, output = self.run_orchestrator(context)

        self.assertTrue(ok)
        self.assertEqual(len(orchestrator.analyses), 3)

        alice = orchestrator.accumulator.get("alice@example.com")
        self.assertEqual(alice.total_added, 14)
        self.assertEqual(alice.total_deleted, 6)
        self.assertEqual(alice.total_ai_added, 9)
        self.assertEqual(alice.total_ai_deleted, 5)
        self.assertEqual(alice.fix_count, 1)
        self.assertEqual(alice.fix_and_aig_count, 1)

        bob = orchestrator.accumulator.get("bob@example.com")
        self.assertEqual(bob.name, "Bob Smith")
        self.assertEqual(bob.total_added, 8)
        self.assertEqual(bob.total_ai_added, 0)

        self.assertIn("提交详情:", output)
        self.assertIn("[跳过] api/login.pb.go", output)
        self.assertIn("开发者统计 (Alice):", output)
        self.assertIn("开发者统计 (Bob Smith):", output)

    def test_quiet_suppresses_trace(self):
        context = make_context(self.tmp.name, log_file=self.log_path, quiet=True)
        _, ok, output = self.run_orchestrator(context)
        self.assertTrue(ok)
        self.assertNotIn("提交详情:", output)
        self.assertIn("统计结果汇总:", output)

    def test_html_report_saved(self):
        context = make_context(self.tmp.name, log_file=self.log_path, html=True, quiet=True)
        _, ok, _ = self.run_orchestrator(context)
        self.assertTrue(ok)
        saved = os.listdir(context.output_dir)
        self.assertEqual(len(saved), 1)
        self.assertTrue(saved[0].startswith("AIGStats_"))
        with open(os.path.join(context.output_dir, saved[0]), encoding="utf-8") as f:
            html = f.read()
        self.assertIn("bob@example.com", html)
        self.assertIn("web/Dashboard.vue", html)

    def test_non_utf8_log_file_is_decoded_with_replacement(self):
        latin1_path = os.path.join(self.tmp.name, "latin1.log")
        with open(latin1_path, "wb") as f:
            f.write(
                f"{HASH_A} 'Jos".encode("ascii")
                + b"\xe9"
                + b"' jose@example.com 2024-01-02 10:00:00 feat: x AIG: 0.5\n4\t0\ta.go\n"
            )
        context = make_context(self.tmp.name, log_file=latin1_path, quiet=True)
        orchestrator, ok, output = self.run_orchestrator(context)

        self.assertTrue(ok)
        self.assertEqual(len(orchestrator.analyses), 1)
        jose = orchestrator.accumulator.get("jose@example.com")
        self.assertEqual(jose.name, "Jos\ufffd")
        self.assertEqual(jose.total_added, 4)
        self.assertEqual(jose.total_ai_added, 2)
        self.assertIn("统计结果汇总:", output)

    def test_non_utf8_stdin_is_decoded_with_replacement(self):
        raw = f"{HASH_A} 'Jos".encode("ascii") + b"\xe9' 2024-01-02 10:00:00 fix: x\n1\t1\ta.go\n"
        fake_stdin = mock.Mock()
        fake_stdin.buffer = io.BytesIO(raw)
        context = make_context(self.tmp.name, shape=HeaderShape.NAME_ONLY, log_file="-")
        with mock.patch("sys.stdin", fake_stdin):
            content = LogFileDataSource(context).get_raw_log()
        self.assertIn("Jos\ufffd", content)

    def test_missing_log_file_fails(self):
        context = make_context(self.tmp.name, log_file=os.path.join(self.tmp.name, "missing.log"))
        _, ok, output = self.run_orchestrator(context)
        self.assertFalse(ok)
        self.assertEqual(output, "")

    def test_git_failure_aborts_without_output(self):
        context = make_context(self.tmp.name)
        with mock.patch("git_utils.is_git_repository", return_value=True), mock.patch(
            "git_utils.run_git_command", return_value=None
        ):
            _, ok, output = self.run_orchestrator(context)
        self.assertFalse(ok)
        self.assertEqual(output, "")

    def test_empty_log_is_valid(self):
        context = make_context(self.tmp.name)
        with mock.patch("git_utils.is_git_repository", return_value=True), mock.patch(
            "git_utils.run_git_command", return_value=""
        ):
            orchestrator, ok, output = self.run_orchestrator(context)
        self.assertTrue(ok)
        self.assertEqual(len(orchestrator.accumulator), 0)
        self.assertIn("未找到提交记录", output)


class TestDataSources(unittest.TestCase):

    def test_factory(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsInstance(
                get_data_source(make_context(tmp, log_file="git.log")), LogFileDataSource
            )
            self.assertIsInstance(get_data_source(make_context(tmp)), LocalGitDataSource)

    def test_git_log_args(self):
        with tempfile.TemporaryDirectory() as tmp:
            person_args = build_git_log_args(
                make_context(tmp, shape=HeaderShape.NAME_ONLY, author="alice")
            )
            repo_args = build_git_log_args(make_context(tmp))

        self.assertIn("--pretty=format:%H '%an' %ad %s %b", person_args)
        self.assertIn("--author=alice", person_args)
        self.assertIn("--pretty=format:%H '%an' %ae %ad %s %b", repo_args)
        self.assertNotIn("--author=alice", repo_args)
        for args in (person_args, repo_args):
            self.assertEqual(args[0], "log")
            self.assertIn("--numstat", args)
            self.assertIn("--no-merges", args)
            self.assertIn("--since=2024-01-01", args)
            self.assertIn("--until=2024-01-15", args)


class TestReportBuilder(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def test_person_report_is_single_summary(self):
        raw = f"{HASH_A} 'Alice' 2024-01-01 10:00:00 Fix bug AIG: 0.5\n10\t2\tmain.go"
        context = make_context(self.tmp.name, shape=HeaderShape.NAME_ONLY, author="Alice")
        config = context.global_config
        analyses = log_parser.analyze_log(
            raw, context.shape, config.INCLUDE_FILE_EXTS, config.EXCLUDE_FILE_EXTS
        )
        report = report_builder.generate_text_report(aggregate(analyses), context)

        self.assertIn("作者: Alice", report)
        self.assertIn("总代码添加: 10 行", report)
        self.assertIn("AI贡献添加: 5 行 (50.00%)", report)
        self.assertIn("AI贡献删除: 1 行 (50.00%)", report)
        self.assertIn("总修复提交: 1 次", report)
        self.assertIn("AI修复贡献率: 100.00%", report)
        self.assertNotIn("开发者统计", report)

    def test_commit_trace(self):
        raw = (
            f"{HASH_A} 'Alice' 2024-01-01 10:00:00 feat: x AIG: 0.25\n"
            "4\t0\ta.go\n-\t-\tb.png\n1\t1\tc.md"
        )
        context = make_context(self.tmp.name, shape=HeaderShape.NAME_ONLY)
        config = context.global_config
        analysis = log_parser.analyze_log(
            raw, context.shape, config.INCLUDE_FILE_EXTS, config.EXCLUDE_FILE_EXTS
        )[0]
        trace = report_builder.format_commit_trace(analysis)

        self.assertIn(f"提交ID: {HASH_A}", trace)
        self.assertIn("AI贡献率: 25.00%", trace)
        self.assertIn("是否修复提交: 否", trace)
        self.assertIn("- a.go (添加: 4, 删除: 0)", trace)
        self.assertIn("[跳过] b.png (不符合统计条件)", trace)
        self.assertIn("[跳过] c.md (不符合统计条件)", trace)
        self.assertIn("AI贡献添加行数: 1", trace)
        self.assertNotIn("邮箱", trace)


if __name__ == "__main__":
    unittest.main()
