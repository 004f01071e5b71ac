"""SOW document engine: pricing, rendering and export of Statements of Work."""
