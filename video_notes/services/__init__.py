"""
Services: external adapters and the processing pipeline.
"""
