"""Application layer: identity flows and the ports they depend on."""
