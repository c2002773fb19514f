#!/usr/bin/env python3
"""
Default configuration values for the panEDTA pipeline
"""

DEFAULT_CONFIG = {
    'inputs': {
        'genome_list': None,
        'coding_sequences': None,
        'curated_library': None,
    },
    'paths': {
        'work_dir': '.',
        'log_dir': 'panedta_logs',
        'library_name': 'panEDTA.TElib.fa',
        'summary_name': 'panEDTA.summary.tsv',
    },
    'tools': {
        'edta_path': 'EDTA.pl',
        'repeatmasker_path': 'RepeatMasker',
        'makeblastdb_path': 'makeblastdb',
        'blastn_path': 'blastn',
    },
    'library': {
        'min_full_length_copies': 3,
        'full_length_coverage': 0.95,
        'id_stride': 5000,
        'id_prefix': 'TE_',
        'id_width': 8,
    },
    'reduction': {
        'min_coverage': 0.95,
        'min_length': 80,
        'min_identity': 80.0,
    },
    'alignment': {
        'max_target_seqs': 0,
        'evalue': 1e-10,
    },
    'reannotation': {
        'divergence': 40,
        'cutoff': 225,
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
    'pipeline': {
        'worker_count': 10,
        'max_parallel_genomes': 1,
        'dry_run': False,
    }
}
