"""YAML node model, loading, scalar conversion, binary data, emitter values and errors."""