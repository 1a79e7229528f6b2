"""
Sample Data Module
"""
from .sample import sample_dataset, sample_frames, write_sample_dataset

__all__ = ["sample_dataset", "sample_frames", "write_sample_dataset"]
