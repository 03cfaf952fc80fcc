"""
Centralized configuration for the bidirectional map
"""
class Config:
    btree_order = 32 # children per internal node
    min_btree_order = 3
    scan_warning_steps = 1024 # guarded scans longer than this are logged
    logger_name = 'bidimap'
