"""
Extraction module for collecting events.

- batching.py: Split place ids into Graph API sized batches
- queries.py: Build place search and batched lookup queries
- fetcher.py: Execute queries concurrently
- aggregator.py: Fold venue payloads into the session state
- sorting.py: Order the final event list
- pipeline.py: Stage machine driving a whole search
"""

from .batching import batch_ids, reference_id
from .queries import GraphQuery, build_place_search_query, build_events_query, build_events_queries
from .fetcher import GraphFetcher
from .aggregator import SessionState, RoundResult, aggregate_round
from .sorting import sort_events
from .pipeline import SearchPipeline, Stage, should_recurse
