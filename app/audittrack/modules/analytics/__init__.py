"""
Analytics module: business-day audit closure durations and monthly averages.
"""
