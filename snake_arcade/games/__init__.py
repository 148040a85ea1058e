"""
Games module for Snake Arcade.
"""
