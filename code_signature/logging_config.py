"""
Logging configuration for code-signature.

Provides structured JSON logging and audit events for verify/sign runs.
Log output goes to stderr; stdout is reserved for document content.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable correlating records of one pipeline run
run_id_var: ContextVar[str] = ContextVar('run_id', default='')


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        run_id = run_id_var.get()
        if run_id:
            log_data["run_id"] = run_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class SignatureAuditLogger:
    """
    Logger for audit events of verify/sign runs.

    Never pass key material to these methods; only addresses and
    checksums are recorded.
    """

    def __init__(self, name: str = "code_signature.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return

        extra = {
            "event_type": event_type,
            "run_id": run_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def document_verified(
        self,
        source: str,
        hash_valid: bool,
        claimed_hash: Optional[str],
        computed_hash: str,
        recovered_address: Optional[str]
    ) -> None:
        """Log a verification result."""
        level = logging.INFO if hash_valid else logging.WARNING
        self._log(
            level,
            "DOCUMENT_VERIFIED",
            source=source,
            hash_valid=hash_valid,
            claimed_hash=claimed_hash,
            computed_hash=computed_hash,
            recovered_address=recovered_address,
            message=f"{source}: checksum {'valid' if hash_valid else 'invalid'}"
        )

    def document_resigned(
        self,
        source: str,
        signer_address: str,
        new_hash: Optional[str],
        previous_signer: Optional[str] = None
    ) -> None:
        """Log that a document failed verification and was signed again."""
        self._log(
            logging.WARNING,
            "DOCUMENT_RESIGNED",
            source=source,
            signer_address=signer_address,
            previous_signer=previous_signer,
            new_hash=new_hash,
            message=f"{source} failed verification, re-signed by {signer_address}"
        )

    def key_generated(self, address: str) -> None:
        """Log creation of a new signing key."""
        self._log(
            logging.WARNING,
            "KEY_GENERATED",
            address=address,
            message=f"Generated new signing key for {address}"
        )

    def document_written(self, destination: str) -> None:
        """Log a rendered document being persisted."""
        self._log(
            logging.INFO,
            "DOCUMENT_WRITTEN",
            destination=destination,
            message=f"Wrote {destination}"
        )

    def signing_failed(self, source: str, reason: str) -> None:
        """Log a run that could not produce signed content."""
        self._log(
            logging.ERROR,
            "SIGNING_FAILED",
            source=source,
            reason=reason,
            message=f"Signing failed for {source}: {reason}"
        )


def configure_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the command line tool.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_run_id(run_id: Optional[str] = None) -> str:
    """
    Set the run ID for the current context.

    Returns:
        The run ID that was set
    """
    if run_id is None:
        run_id = str(uuid.uuid4())
    run_id_var.set(run_id)
    return run_id


def get_run_id() -> str:
    """Get the current run ID."""
    return run_id_var.get()


# Global audit logger instance
audit_log = SignatureAuditLogger()
