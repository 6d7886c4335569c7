"""Multi-wallet Polymarket portfolio tracker."""
