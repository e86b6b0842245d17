from .h5_container import (
    DATASET_PAIRS,
    DatasetComparison,
    create_container,
    open_container,
    read_dataset,
    read_raw_doubles,
    summarize_container,
    write_dataset,
    zfp_filter_available,
)

__all__ = [
    "DATASET_PAIRS", "DatasetComparison",
    "create_container", "open_container", "read_dataset", "read_raw_doubles",
    "summarize_container", "write_dataset", "zfp_filter_available",
]
