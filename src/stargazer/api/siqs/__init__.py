"""Sky Imaging Quality Score (SIQS) calculation."""
