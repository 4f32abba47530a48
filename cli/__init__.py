"""Command line interface for the certdesk API client"""
