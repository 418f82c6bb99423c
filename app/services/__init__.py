"""
Kushfinds business services.
"""
