"""Per-file task fan-out over a process pool."""

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Optional, Sequence, TypeVar

from tqdm import tqdm

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_per_file(
    worker: Callable[[tuple], T],
    tasks: Sequence[tuple],
    workers: int = 1,
    desc: str = "Processing",
    initializer: Optional[Callable[..., Any]] = None,
    initargs: tuple = (),
    show_progress: bool = True,
) -> list[T]:
    """
    Run ``worker`` once per task and return results in task order.

    Workers must be module-level functions so they can be pickled. The
    pool size is capped at the number of tasks; with one worker (or one
    task) everything runs in the calling process. The first failing task
    cancels all pending ones and its exception propagates, so a stage
    never continues with partial results.

    Args:
        worker: Function applied to each task tuple.
        tasks: Task tuples; the first element identifies the input file.
        workers: Requested number of worker processes.
        desc: Progress bar label.
        initializer: Called once per worker process before any task.
        initargs: Arguments for ``initializer``.
        show_progress: Whether to display a tqdm progress bar.

    Returns:
        One result per task, in the order of ``tasks``.
    """
    workers = max(1, min(workers, len(tasks)))

    if workers == 1:
        if initializer is not None:
            initializer(*initargs)
        return [
            worker(task)
            for task in tqdm(tasks, desc=desc, disable=not show_progress)
        ]

    logger.debug(f"{desc}: {len(tasks)} tasks on {workers} workers")
    results: list[Optional[T]] = [None] * len(tasks)

    with ProcessPoolExecutor(
        max_workers=workers, initializer=initializer, initargs=initargs
    ) as executor:
        futures = {executor.submit(worker, task): i for i, task in enumerate(tasks)}
        try:
            for future in tqdm(
                as_completed(futures),
                total=len(tasks),
                desc=f"{desc} ({workers} workers)",
                disable=not show_progress,
            ):
                results[futures[future]] = future.result()
        except Exception:
            failed = [
                tasks[i][0]
                for f, i in futures.items()
                if f.done() and not f.cancelled() and f.exception() is not None
            ]
            logger.error(f"{desc} failed on {failed[0] if failed else 'unknown task'}")
            executor.shutdown(wait=True, cancel_futures=True)
            raise

    return results
