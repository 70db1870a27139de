"""docshelf: хранение и поиск документов по категориям и тегам."""
