"""JSON-file-backed document store with whole-store transactions.

Documents are plain dicts grouped in named collections and keyed by ID.
A transaction holds the store lock for its whole lifetime and works on
a private copy of the committed state, so transactions are
serializable: a checkout's read-check-decrement can never interleave
with another's.

With a backing file the lock is two-level: a thread lock inside the
process and an ``fcntl.flock`` on a sidecar ``.<name>.lock`` file across
processes (the API server and CLI commands share one file).  The
committed state is re-read from disk under that lock at the start of
every transaction.  Commit rewrites the file atomically; abort simply
drops the copy.
"""

from __future__ import annotations

import copy
import fcntl
import json
import os
import tempfile
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

import structlog

from storefront.domain.exceptions import TransactionTimeoutError

logger = structlog.get_logger(__name__)

Collections = dict[str, dict[str, dict]]

_LOCK_POLL_INTERVAL = 0.01


class Transaction:

    def __init__(self, store: DocumentStore, collections: Collections) -> None:
        self._store = store
        self._collections = collections
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def collection(self, name: str) -> dict[str, dict]:
        """Mutable view of one collection inside this transaction."""
        self._require_active()
        return self._collections.setdefault(name, {})

    def commit(self) -> None:
        self._require_active()
        # If persisting fails the transaction stays active and is aborted
        # by whoever opened it.
        self._store._apply(self._collections)
        self._active = False
        self._store._release()

    def abort(self) -> None:
        if not self._active:
            return
        self._active = False
        self._store._release()

    def _require_active(self) -> None:
        if not self._active:
            raise RuntimeError("Transaction is no longer active")


class DocumentStore:

    def __init__(self, file_path: Path | None = None, transaction_timeout: float = 10.0) -> None:
        self._file_path = file_path
        self._transaction_timeout = transaction_timeout
        self._lock = threading.Lock()
        self._lock_file: IO[str] | None = None
        self._committed: Collections = {}
        if file_path is not None and not file_path.exists():
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text("{}", encoding="utf-8")

    @property
    def file_path(self) -> Path | None:
        return self._file_path

    # --- Transactions ---------------------------------------------------------

    def begin(self) -> Transaction:
        """Start a transaction, waiting up to the configured timeout."""
        deadline = time.monotonic() + self._transaction_timeout
        if not self._lock.acquire(timeout=self._transaction_timeout):
            raise self._timeout()
        try:
            self._lock_file = self._acquire_file_lock(deadline)
            collections = self._load() if self._file_path is not None else copy.deepcopy(self._committed)
        except BaseException:
            self._release()
            raise
        return Transaction(self, collections)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Short transaction for callers without a unit of work.

        Commits on normal exit, aborts if the block raises.
        """
        txn = self.begin()
        try:
            yield txn
            txn.commit()
        finally:
            txn.abort()

    @contextmanager
    def read(self) -> Iterator[Transaction]:
        """Consistent read; always aborts, so nothing is ever written."""
        txn = self.begin()
        try:
            yield txn
        finally:
            txn.abort()

    # --- Internal -------------------------------------------------------------

    def _apply(self, collections: Collections) -> None:
        self._persist(collections)
        self._committed = collections

    def _release(self) -> None:
        lock_file, self._lock_file = self._lock_file, None
        try:
            if lock_file is not None:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                lock_file.close()
        finally:
            self._lock.release()

    def _timeout(self) -> TransactionTimeoutError:
        return TransactionTimeoutError(
            "Could not start a transaction, please retry",
            timeout=self._transaction_timeout,
        )

    def _acquire_file_lock(self, deadline: float) -> IO[str] | None:
        if self._file_path is None:
            return None
        lock_path = self._file_path.with_name(f".{self._file_path.name}.lock")
        lock_file = open(lock_path, "w")
        while True:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                return lock_file
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    lock_file.close()
                    raise self._timeout()
                time.sleep(_LOCK_POLL_INTERVAL)

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> Collections:
        if not self._file_path.exists():
            return {}
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist(self, collections: Collections) -> None:
        if self._file_path is None:
            return
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(collections, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except OSError:
            logger.exception("store_persist_failed", path=str(self._file_path))
            Path(tmp_name).unlink(missing_ok=True)
            raise
