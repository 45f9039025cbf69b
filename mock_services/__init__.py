"""Local stand-ins for the PayU and Ecwid APIs."""
