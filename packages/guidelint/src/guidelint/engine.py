import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Collection, Iterable, List, Optional, Protocol, Sequence, Union

from guidelint_syntax.lexer import tokenize
from guidelint_syntax.node_types import SourceFile

from .config import DEFAULT_MARKER, LintConfig
from .exceptions import LintCancelled, RuleEvaluationError
from .models import RULE_FAILURE_ID, FileReport, Finding, Severity, sort_findings
from .registry import RuleRegistry, build_registry
from .rules.base import Rule
from .suppression import parse_directives, resolve

logger = logging.getLogger(__name__)


class CancellationSignal(Protocol):
    """Anything with `is_set()`, typically a threading.Event"""

    def is_set(self) -> bool: ...


def _run_rule(rule: Rule, source: SourceFile) -> List[Finding]:
    """Run one rule to completion; any failure becomes a single ERROR finding."""
    try:
        findings = list(rule.evaluate(source))
        for finding in findings:
            if not source.is_valid_position(finding.line, finding.column):
                raise ValueError(f"finding outside the file at {finding.line}:{finding.column}")
        return findings
    except Exception as e:
        error = RuleEvaluationError(rule.rule_id, e)
        logger.warning("%s (%s)", error, source.path or "<string>", exc_info=e)
        return [
            Finding(
                rule_id=RULE_FAILURE_ID,
                severity=Severity.ERROR,
                line=1,
                column=1,
                message=str(error),
            )
        ]


def collect_findings(
    source: SourceFile,
    rules: Sequence[Rule],
    cancel: Optional[CancellationSignal] = None,
    max_workers: Optional[int] = None,
) -> List[Finding]:
    """Run every rule independently and return their findings in report order.

    Rules never see each other's output. The cancellation signal is checked
    between rules, never inside one; when it is set LintCancelled is raised.
    """
    findings: List[Finding] = []

    def check_cancelled():
        if cancel is not None and cancel.is_set():
            raise LintCancelled(f"Evaluation of {source.path or '<string>'} cancelled")

    if max_workers and max_workers > 1 and len(rules) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            try:
                futures = []
                for rule in rules:
                    check_cancelled()
                    futures.append(pool.submit(_run_rule, rule, source))
                for future in futures:
                    findings.extend(future.result())
                    check_cancelled()
            except LintCancelled:
                # Rules already running finish; queued ones never start
                pool.shutdown(wait=False, cancel_futures=True)
                raise
    else:
        for rule in rules:
            check_cancelled()
            findings.extend(_run_rule(rule, source))

    return sort_findings(findings)


def evaluate(
    source: SourceFile,
    rules: Sequence[Rule],
    *,
    marker: str = DEFAULT_MARKER,
    known_rule_ids: Optional[Collection[str]] = None,
    cancel: Optional[CancellationSignal] = None,
    max_workers: Optional[int] = None,
) -> List[Finding]:
    """Run the rules, then apply the file's suppression comments.

    `known_rule_ids` decides which suppressed identifiers are dead; it
    defaults to the identifiers of `rules`, but callers holding a registry
    should pass all registered identifiers so that suppressions of disabled
    rules are not reported.
    """
    findings = collect_findings(source, rules, cancel=cancel, max_workers=max_workers)
    directives = parse_directives(source, marker)
    if known_rule_ids is None:
        known_rule_ids = [rule.rule_id for rule in rules]
    return resolve(findings, directives, known_rule_ids)


class LinterEngine:
    """Core engine: tokenizes files and evaluates the active rules on them"""

    def __init__(self, registry: Optional[RuleRegistry] = None, config: Optional[LintConfig] = None):
        self.config = config or LintConfig()
        self.registry = registry if registry is not None else build_registry(self.config)
        self.rules = self.registry.active_rules(self.config)

    def check_source(
        self,
        text: str,
        path: str = "",
        language: Optional[str] = None,
        cancel: Optional[CancellationSignal] = None,
    ) -> List[Finding]:
        """Lint text that is already in memory."""
        source = tokenize(text, path=path, language=language or self.config.language)
        findings = evaluate(
            source,
            self.rules,
            marker=self.config.suppression_marker,
            known_rule_ids=self.registry.rule_ids,
            cancel=cancel,
        )
        min_rank = self.config.min_severity.rank
        return [f for f in findings if f.severity.rank >= min_rank]

    def check_file(self, file_path: Union[str, Path], cancel: Optional[CancellationSignal] = None) -> List[Finding]:
        """Lint one file on disk. Undecodable bytes are replaced, not fatal."""
        file_path = Path(file_path)
        text = file_path.read_bytes().decode("utf-8", errors="replace")
        return self.check_source(text, path=str(file_path), cancel=cancel)

    def check_files(
        self,
        files: Iterable[Union[str, Path]],
        max_workers: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> List[FileReport]:
        """Lint a batch of files, one task per file, reports in input order.

        Each file gets its own cancellation event; with a timeout a timer
        sets it, and the file's evaluation stops at the next rule boundary.
        """
        files = [Path(f) for f in files]
        workers = max_workers or self.config.workers
        if workers <= 1 or len(files) <= 1:
            return [self._check_one(f, timeout) for f in files]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda f: self._check_one(f, timeout), files))

    def _check_one(self, file_path: Path, timeout: Optional[float]) -> FileReport:
        cancel = threading.Event()
        timer = None
        if timeout is not None:
            timer = threading.Timer(timeout, cancel.set)
            timer.daemon = True
            timer.start()
        try:
            return FileReport(path=str(file_path), findings=self.check_file(file_path, cancel=cancel))
        except LintCancelled as e:
            logger.info("%s after %ss", e, timeout)
            return FileReport(path=str(file_path), cancelled=True, error=str(e))
        except OSError as e:
            logger.info("Cannot read %s: %s", file_path, e)
            return FileReport(path=str(file_path), error=f"Cannot read file: {e}")
        finally:
            if timer is not None:
                timer.cancel()
