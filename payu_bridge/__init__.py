"""PayU ⇄ Ecwid payment bridge."""
