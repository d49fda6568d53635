"""
Requirements module.

Maps a facility configuration (discharge type + low-volume flag) to the
ordered checklist of compliance documents the audit has to collect.
"""
