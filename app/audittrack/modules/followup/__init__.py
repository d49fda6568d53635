"""
Follow-up module: drafts reminder emails for missing documents via Gemini.
"""
