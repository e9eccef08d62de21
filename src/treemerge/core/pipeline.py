# src/treemerge/core/pipeline.py
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO, Collection, List, Optional, Sequence

import pathspec

from treemerge.config import CHANNEL_CAPACITY, DEFAULT_COMMENT
from treemerge.core.channel import RecordChannel
from treemerge.core.filters import PathFilter
from treemerge.core.registry import DedupRegistry
from treemerge.core.sink import AggregationSink
from treemerge.core.walker import TreeWalker
from treemerge.errors import ConfigError
from treemerge.models import RunReport, WalkResult


def run_pipeline(
    roots: Sequence[str],
    path_filter: PathFilter,
    destination: BinaryIO,
    comment_symbol: str = DEFAULT_COMMENT,
    capacity: int = CHANNEL_CAPACITY,
    workers: int = 1,
    ignore_spec: Optional[pathspec.PathSpec] = None,
    exclude_paths: Collection[str] = (),
    count_tokens: bool = True,
) -> RunReport:
    """
    Runs one walker per root against a single sink.

    A sink failure is raised (SinkError) and ends the run. Walker failures
    are printed as warnings and returned in the report; they never stop the
    other roots.
    """
    if not roots:
        raise ConfigError("No paths provided")
    if workers < 1:
        raise ConfigError("workers must be at least 1")
    try:
        channel = RecordChannel(capacity)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    walker = TreeWalker(
        path_filter,
        DedupRegistry(),
        channel,
        comment_symbol=comment_symbol,
        ignore_spec=ignore_spec,
        exclude_paths=exclude_paths,
        count_tokens=count_tokens,
    )
    sink = AggregationSink(channel, destination)

    results: List[WalkResult] = []
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="treemerge-sink") as sink_pool:
        sink_future = sink_pool.submit(sink.drain)
        try:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="treemerge-walk") as walk_pool:
                results = list(walk_pool.map(walker.walk, roots))
        finally:
            # No-op once cancelled, so a failed sink cannot block us here
            channel.close()
        # Raises SinkError if the sink gave up; that outcome wins
        stats = sink_future.result()

    for result in results:
        if result.error is not None:
            print(f"  > [Warning] Skipping {result.error}", file=sys.stderr)

    return RunReport(stats=stats, results=results)
