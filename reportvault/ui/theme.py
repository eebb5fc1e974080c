"""Dashboard and secure-viewer CSS for reportvault.

Palette: slate backgrounds (#0F172A / #1E293B) with the brand blue
(#1783DF) for accents and the watermark.
"""

from __future__ import annotations

DASHBOARD_CSS = """

/* ══════════════════════════════════════════════════════════════════
   SCREEN
   ══════════════════════════════════════════════════════════════════ */

Screen {
    background: #0A0F1A;
    layout: vertical;
}

/* ══════════════════════════════════════════════════════════════════
   HEADER BAR
   ══════════════════════════════════════════════════════════════════ */

#header-bar {
    dock: top;
    height: 3;
    background: #0F172A;
    padding: 1 2;
    border-bottom: heavy #1E293B;
}

#header-title {
    width: 1fr;
    color: #E2E8F0;
    text-style: bold;
}

#header-subtitle {
    width: auto;
    color: #94A3B8;
    text-style: italic;
}

/* ══════════════════════════════════════════════════════════════════
   DASHBOARD GRID
   ══════════════════════════════════════════════════════════════════ */

#dashboard {
    height: 1fr;
    padding: 0 1;
}

/* ══════════════════════════════════════════════════════════════════
   PANEL BASE — every panel gets this
   ══════════════════════════════════════════════════════════════════ */

.panel {
    width: 1fr;
    border: heavy #1E293B;
    border-title-color: #1783DF;
    border-title-style: bold;
    background: #0F172A;
    padding: 0 1;
    overflow-y: auto;
}

.panel:focus-within {
    border: heavy #1783DF;
}

.panel-hint {
    color: #94A3B8;
    height: auto;
    margin: 0 0 1 0;
}

.field-row {
    height: 3;
    layout: horizontal;
    align: left middle;
}

.field-label {
    width: 10;
    color: #94A3B8;
    padding: 0 1 0 0;
}

.field-input {
    width: 1fr;
}

#strength-bar {
    height: 1;
    margin: 0 0 1 0;
}

.warning-note {
    color: #F59E0B;
    height: auto;
    margin: 1 0;
}

.action-button {
    width: 100%;
    margin: 1 0 0 0;
    background: #1783DF;
    color: #FFFFFF;
    text-style: bold;
}

.action-button:disabled {
    background: #1E293B;
    color: #475569;
}
"""


VIEWER_CSS = """

SecureViewerScreen {
    background: #0A0F1A;
    layers: base overlay;
}

#viewer-navbar {
    dock: top;
    height: 3;
    background: #0F172A;
    padding: 1 2;
    border-bottom: heavy #1E293B;
}

#viewer-brand {
    width: 1fr;
    color: #E2E8F0;
    text-style: bold;
}

#viewer-zoom {
    width: auto;
    color: #E2E8F0;
    padding: 0 2;
}

#viewer-badge {
    width: auto;
    color: #94A3B8;
}

#viewer-pages {
    height: 1fr;
    align-horizontal: center;
    padding: 1 0;
}

.page {
    width: auto;
    height: auto;
    background: #FFFFFF;
    color: #0F172A;
    padding: 1 2;
    margin: 0 0 1 0;
}

#viewer-footer {
    dock: bottom;
    height: 1;
    background: #0F172A;
    color: #94A3B8;
    content-align: center middle;
}

#obscure-overlay {
    layer: overlay;
    width: 100%;
    height: 100%;
    background: #0A0F1A;
    color: #94A3B8;
    content-align: center middle;
    display: none;
}

#obscure-overlay.-active {
    display: block;
}
"""
