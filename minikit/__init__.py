"""Pure-Python pieces for sequence alignment: FASTA/FASTQ reading, range-minimum trees, sorting, CIGAR handling and spliced alignment."""

__version__ = "0.1.0"

__all__ = ["constants", "fastx", "ksw", "packed", "rmqtree", "sorting", "splice"]