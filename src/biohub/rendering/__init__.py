"""Drawing surfaces that materialise chart draw specs."""
