"""Infrastructure layer - converters, registry, binding, loaders, reload and logging."""
