#!/usr/bin/env python3
"""
Configuration schema definition for validation
"""
from typing import Dict, Any, List


class ConfigSchema:
    """Configuration schema for validation"""

    SCHEMA = {
        'inputs': {
            'genome_list': {'type': str, 'required': False},
            'coding_sequences': {'type': str, 'required': False},
            'curated_library': {'type': str, 'required': False},
        },
        'paths': {
            'work_dir': {'type': str, 'required': True},
            'log_dir': {'type': str, 'required': False},
            'library_name': {'type': str, 'required': True},
            'summary_name': {'type': str, 'required': False},
        },
        'tools': {
            'edta_path': {'type': str, 'required': False},
            'repeatmasker_path': {'type': str, 'required': False},
            'makeblastdb_path': {'type': str, 'required': False},
            'blastn_path': {'type': str, 'required': False},
        },
        'library': {
            'min_full_length_copies': {'type': int, 'required': True, 'min': 1},
            'full_length_coverage': {'type': (int, float), 'required': False, 'min': 0, 'max': 1},
            'id_stride': {'type': int, 'required': True, 'min': 1},
            'id_prefix': {'type': str, 'required': False},
            'id_width': {'type': int, 'required': False, 'min': 1},
        },
        'reduction': {
            'min_coverage': {'type': (int, float), 'required': True, 'min': 0, 'max': 1},
            'min_length': {'type': int, 'required': True, 'min': 0},
            'min_identity': {'type': (int, float), 'required': True, 'min': 0, 'max': 100},
        },
        'alignment': {
            'max_target_seqs': {'type': int, 'required': False, 'min': 0},
            'evalue': {'type': (int, float), 'required': False, 'min': 0},
        },
        'reannotation': {
            'divergence': {'type': int, 'required': False},
            'cutoff': {'type': int, 'required': False},
        },
        'logging': {
            'level': {'type': str, 'required': False},
            'format': {'type': str, 'required': False},
        },
        'pipeline': {
            'worker_count': {'type': int, 'required': True, 'min': 1},
            'max_parallel_genomes': {'type': int, 'required': False, 'min': 1},
            'dry_run': {'type': bool, 'required': False},
        }
    }

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate configuration against schema

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        # Check required fields
        for section, fields in cls.SCHEMA.items():
            if any(props.get('required', False) for _, props in fields.items()):
                if section not in config:
                    errors.append(f"Missing required configuration section: {section}")
                    continue

            if section not in config:
                continue

            section_config = config[section]
            for field, props in fields.items():
                if props.get('required', False) and section_config.get(field) is None:
                    errors.append(f"Missing required configuration field: {section}.{field}")

        # Validate field types and ranges
        for section, fields in cls.SCHEMA.items():
            if section not in config:
                continue

            section_config = config[section]
            for field, props in fields.items():
                value = section_config.get(field)
                if value is None or 'type' not in props:
                    continue

                expected_type = props['type']
                # bool is an int subclass; reject it for numeric fields
                if not isinstance(value, expected_type) or (
                        isinstance(value, bool) and expected_type is not bool):
                    names = (expected_type.__name__ if isinstance(expected_type, type)
                             else "/".join(t.__name__ for t in expected_type))
                    errors.append(
                        f"Invalid type for {section}.{field}: expected {names}, "
                        f"got {type(value).__name__}"
                    )
                    continue

                if 'min' in props and value < props['min']:
                    errors.append(f"Value for {section}.{field} must be >= {props['min']}, got {value}")
                if 'max' in props and value > props['max']:
                    errors.append(f"Value for {section}.{field} must be <= {props['max']}, got {value}")

        return errors
