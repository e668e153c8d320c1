"""
Third-party integrations (error tracking).
"""
