"""
Serialize Codeship builds per branch: wait for older running builds to finish.
"""

__version__ = "0.1.0"
