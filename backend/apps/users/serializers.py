from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Serializer for the current user / profile updates"""
    name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'username', 'first_name', 'last_name', 'name',
            'avatar', 'bio', 'role', 'subscription_plan', 'oauth_provider',
            'storage_used', 'storage_limit', 'max_sites', 'is_email_verified',
            'is_active', 'last_login', 'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'email', 'role', 'subscription_plan', 'oauth_provider',
            'storage_used', 'storage_limit', 'max_sites', 'is_email_verified',
            'is_active', 'last_login', 'created_at', 'updated_at'
        ]


class RegisterSerializer(serializers.ModelSerializer):
    username = serializers.CharField(required=False, allow_blank=True, max_length=150)
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    password_confirm = serializers.CharField(write_only=True, style={'input_type': 'password'})

    class Meta:
        model = User
        fields = ['email', 'username', 'password', 'password_confirm', 'first_name', 'last_name']

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('User already exists with this email')
        return value

    def validate_username(self, value):
        if value and User.objects.filter(username=value).exists():
            raise serializers.ValidationError('This username is already taken')
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs.pop('password_confirm'):
            raise serializers.ValidationError({'password_confirm': 'Passwords do not match'})

        if not attrs.get('username'):
            attrs['username'] = User.generate_unique_username(attrs['email'])

        candidate = User(
            email=attrs['email'],
            username=attrs['username'],
            first_name=attrs.get('first_name', ''),
            last_name=attrs.get('last_name', ''),
        )
        validate_password(attrs['password'], user=candidate)
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_old_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect')
        return value

    def validate(self, attrs):
        validate_password(attrs['new_password'], user=self.context['request'].user)
        return attrs


class SiteBuilderTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Email/password login that also returns the user"""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['role'] = user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['success'] = True
        data['user'] = UserSerializer(self.user).data
        return data
