"""
BadgerBase – course search, section grouping and availability notifications.
"""
