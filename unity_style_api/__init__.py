"""
HTTP service exposing the Unity C# style checker.
"""
