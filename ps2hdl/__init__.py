"""APA partition headers and slices, HDLoader game headers, disc database and IOPRP images."""

__version__ = "0.9.2"