def validated(serializer_class, request):
    """Run the request body through ``serializer_class`` and return its validated data."""
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data
