"""Reflex configuration for the HR console demo app."""

import reflex as rx

config = rx.Config(
    app_name="hr_console_demo",
    plugins=[rx.plugins.SitemapPlugin()],
)
