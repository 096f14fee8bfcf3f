"""
Domain layer for sniview.

Pure logic over event records: filtering, ordering, rule candidates and
target-set selection. Nothing here performs I/O.
"""

from sniview.domain.filtering import (
    FilterQuery,
    FIELD_ACCESSORS,
    GLOBAL_FIELDS,
    parse_filter,
    filter_records,
)
from sniview.domain.sorting import timestamp_to_millis, sort_key, sort_records
from sniview.domain.variants import (
    generate_domain_variants,
    generate_ip_variants,
    strip_port,
)
from sniview.domain.set_target import TargetState, SetTargetResolver, CREATE_SET_LABEL

__all__ = [
    # Filtering
    "FilterQuery",
    "FIELD_ACCESSORS",
    "GLOBAL_FIELDS",
    "parse_filter",
    "filter_records",
    # Sorting
    "timestamp_to_millis",
    "sort_key",
    "sort_records",
    # Variants
    "generate_domain_variants",
    "generate_ip_variants",
    "strip_port",
    # Set target
    "TargetState",
    "SetTargetResolver",
    "CREATE_SET_LABEL",
]
