"""
Code Signature Pipeline

Sequences one run: read -> verify -> (sign) -> render.

    VERIFYING --hash valid--------------------------> DONE (PASS)
    VERIFYING --hash invalid, verify only-----------> DONE (FAIL)
    VERIFYING --hash invalid-----> SIGNING ---------> DONE (RESIGNED | FAIL)

Re-signing happens whenever the checksum fails, whoever the recovered
signer is. RESIGNED means the original document failed but a valid
replacement was produced; it exits 0 like PASS.
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TextIO

from .logging_config import audit_log
from .markers import DEFAULT_PREFIX
from .signer import SignResult, render_markers, sign
from .verifier import VerifyResult, verify

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


class PipelineState(str, Enum):
    VERIFYING = "VERIFYING"
    SIGNING = "SIGNING"
    DONE = "DONE"


class Outcome(str, Enum):
    """
    Final outcome of a run.

    PASS: embedded checksum matched
    RESIGNED: checksum failed, a newly signed document was produced
    FAIL: checksum failed and nothing was (or could be) signed
    """
    PASS = "PASS"
    RESIGNED = "RESIGNED"
    FAIL = "FAIL"


@dataclass
class PipelineOptions:
    """Caller choices for one run."""
    file_path: str
    verify_only: bool = False
    write: bool = False
    silent: bool = False
    prefix: str = DEFAULT_PREFIX
    out: Optional[str] = None
    mnemonic: Optional[str] = field(default=None, repr=False)

    def destination(self) -> Optional[str]:
        """Where a signed document is written; None means stdout."""
        if self.out:
            return self.out
        if self.file_path == STDIN_PATH:
            return None
        return self.file_path


@dataclass(frozen=True)
class PipelineResult:
    """Result of one pipeline run."""
    outcome: Outcome
    verify_result: VerifyResult
    sign_result: Optional[SignResult] = None
    written_to: Optional[str] = None

    def passed(self) -> bool:
        return self.outcome != Outcome.FAIL

    @property
    def exit_code(self) -> int:
        return 0 if self.passed() else 1


def read_document(file_path: str, stdin: Optional[TextIO] = None) -> str:
    """
    Read a document from a path, or from stdin when the path is ``-``.

    Line terminators are kept as they are in the file.
    """
    if file_path == STDIN_PATH:
        return (stdin or sys.stdin).read()
    with open(file_path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


def write_document(file_path: str, content: str) -> None:
    """Write rendered content to a path, byte for byte."""
    with open(file_path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)


class SignaturePipeline:
    """
    Runs verify and, when needed, sign for a single document.

    Informational lines go to ``stdout`` unless ``silent``; a freshly
    generated mnemonic always goes to ``stderr``.
    """

    def __init__(
        self,
        options: PipelineOptions,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None
    ):
        self.options = options
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.state = PipelineState.VERIFYING

    def _info(self, message: str) -> None:
        if not self.options.silent:
            print(message, file=self.stdout)

    def run(self, content: Optional[str] = None) -> PipelineResult:
        """
        Execute the pipeline.

        Args:
            content: Document text; read from ``options.file_path`` when None

        Raises:
            OSError: if the document cannot be read or written
            SigningError: if key derivation or signing fails
        """
        options = self.options
        if content is None:
            content = read_document(options.file_path, self.stdin)

        self.state = PipelineState.VERIFYING
        verify_result = verify(content, options.prefix)
        audit_log.document_verified(
            source=options.file_path,
            hash_valid=verify_result.hash_valid,
            claimed_hash=verify_result.claimed_hash,
            computed_hash=verify_result.computed_hash,
            recovered_address=verify_result.recovered_address,
        )

        if verify_result.hash_valid:
            self._info(f"OK: {verify_result.recovered_address}")
            return self._done(Outcome.PASS, verify_result)

        if options.verify_only:
            self._info("SHA256: ERROR")
            return self._done(Outcome.FAIL, verify_result)

        self.state = PipelineState.SIGNING
        sign_result = sign(verify_result, options.mnemonic)

        if sign_result.generated_mnemonic is not None:
            print(f"Generated mnemonic: {sign_result.generated_mnemonic}", file=self.stderr)
            print(f"Address: {sign_result.signer_address}", file=self.stderr)
            audit_log.key_generated(sign_result.signer_address)

        if not sign_result.has_content():
            print("ERROR: no signed content", file=self.stderr)
            audit_log.signing_failed(options.file_path, "no signed content")
            return self._done(Outcome.FAIL, verify_result, sign_result)

        audit_log.document_resigned(
            source=options.file_path,
            signer_address=sign_result.signer_address,
            new_hash=sign_result.new_hash,
            previous_signer=verify_result.recovered_address,
        )

        written_to = None
        if options.write:
            written_to = self._render(sign_result.rendered_content)
        else:
            self._info(render_markers(sign_result, options.prefix))

        return self._done(Outcome.RESIGNED, verify_result, sign_result, written_to)

    def _render(self, rendered: str) -> Optional[str]:
        destination = self.options.destination()
        if destination is None:
            self.stdout.write(rendered)
            return None

        write_document(destination, rendered)
        audit_log.document_written(destination)
        self._info(f"Wrote: {destination}")
        return destination

    def _done(
        self,
        outcome: Outcome,
        verify_result: VerifyResult,
        sign_result: Optional[SignResult] = None,
        written_to: Optional[str] = None
    ) -> PipelineResult:
        self.state = PipelineState.DONE
        logger.info("%s: %s", self.options.file_path, outcome.value)
        return PipelineResult(
            outcome=outcome,
            verify_result=verify_result,
            sign_result=sign_result,
            written_to=written_to,
        )


def run_pipeline(options: PipelineOptions, **streams) -> PipelineResult:
    """Convenience function to run one pipeline."""
    return SignaturePipeline(options, **streams).run()
